from fastapi import FastAPI

from db import init_db
from routes import accounts, forecast, insights, recurring

app = FastAPI(title="Budget Projections")


@app.on_event("startup")
def startup():
    init_db()


app.include_router(accounts.router)
app.include_router(recurring.router)
app.include_router(forecast.router)
app.include_router(insights.router)


@app.get("/health")
def health():
    return {"status": "ok"}
