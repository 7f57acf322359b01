from fastapi import FastAPI

from agora.api.conversations import router as trust_router
from agora.api.error_handlers import register_error_handlers

app = FastAPI(title="Agora Trust API")
app.include_router(trust_router)
register_error_handlers(app)
