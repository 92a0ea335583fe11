import logging

log = logging.getLogger("maruou")


def startup_banner(
    *,
    model: str,
    api: str,
    api_style: str,
    bind: str,
    version: str,
    mode: str,
    session_ttl: int,
    session_max: int,
) -> None:
    rows = [
        ("MARUOU", f"v{version} ({mode})"),
        ("MODEL", f"{model} via {api} [{api_style}]"),
        ("BIND", bind),
        ("SESSIONS", f"ttl={session_ttl}s max={session_max}"),
    ]

    label_width = max(len(k) for k, _ in rows)
    line = "─" * 44

    log.info(line)
    for k, v in rows:
        log.info("%s : %s", k.ljust(label_width), v)
    log.info(line)
