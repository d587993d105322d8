from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from smoke_buddy.api.v1.slack import router as slack_router
from smoke_buddy.journal import log_error

app = FastAPI(title="smoke-buddy")

# Routers
app.include_router(slack_router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log_error(f"{request.method} {request.url.path}", exc)
    return JSONResponse(status_code=500, content={"detail": "internal error"})


@app.get("/", response_class=PlainTextResponse)
def root() -> str:
    return "Bot running."


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
