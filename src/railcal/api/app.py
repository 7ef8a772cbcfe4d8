from fastapi import FastAPI
from railcal.api.public import router as public_router

app = FastAPI(title="railcal public api")
app.include_router(public_router)
