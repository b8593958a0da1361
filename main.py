# main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import database
from config import CORS_ORIGINS, LOG_LEVEL
from routes import questions, question_sets, rooms, students, filters, analytics

logging.basicConfig(level=LOG_LEVEL)

app = FastAPI(title="Question Bank API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(questions.router)
app.include_router(question_sets.router)
app.include_router(rooms.router)
app.include_router(students.router)
app.include_router(filters.router)
app.include_router(analytics.router)


@app.on_event("startup")
async def startup_event():
    await database.connect(app)


@app.on_event("shutdown")
async def shutdown_event():
    await database.close(app)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
