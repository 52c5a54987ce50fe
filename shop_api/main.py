# main.py
from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from shop_api import routes, settings
from shop_api.database import create_db_and_tables, engine
from shop_api.limiter import limiter, rate_limit_exceeded_handler

settings.configure_logging()

app = FastAPI(title="Shop API", version="1.0.0")

# slowapi looks the limiter up on app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_exception_handler(SQLAlchemyError, routes.database_error_handler)

# Include the router from routes.py
app.include_router(routes.router, prefix=settings.API_PREFIX)

@app.on_event("startup")
def on_startup():
    create_db_and_tables()

@app.on_event("shutdown")
def on_shutdown():
    engine.dispose()

@app.get("/")
def read_root():
    return {"message": "Hello, welcome to the Shop API!", "docs": "/docs"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
