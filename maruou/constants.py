APP_NAME = "Maruou"
APP_VERSION = "1.2.0"

QUIZ_SIZE = 5
CHOICE_COUNT = 4

# Wire names used by the generation endpoint and the model output.
FIELD_QUESTION = "question"
FIELD_CHOICES = "choices"
FIELD_ANSWER_INDEX = "answerIndex"
