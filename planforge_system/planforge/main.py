from fastapi import FastAPI
from planforge.api.routes import router


app = FastAPI(title="PlanForge API (Gemini)", version="0.1.0")
app.include_router(router, prefix="/v1")
