import logging

from fastapi import FastAPI

from catering.api.messages import router as messages_router
from catering.core.config import settings

CONTEXT_KEYS = ("activity_id", "verb", "card", "connection", "user_id", "status", "reason")


class ContextFormatter(logging.Formatter):
    """Appends turn context passed through `extra=` as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        pairs = [
            f"{key}={getattr(record, key)}"
            for key in CONTEXT_KEYS
            if getattr(record, key, None) not in (None, "")
        ]
        return f"{base} | {' '.join(pairs)}" if pairs else base


def configure_logging(level: str) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(asctime)s %(levelname)s:%(name)s:%(message)s"))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="Catering Bot", version="1.0.0")
app.include_router(messages_router, tags=["messages"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
