"""
Main entrypoint for the FastAPI server
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from fastapi.staticfiles import StaticFiles
from core.lifespan import lifespan
from core.config import get_settings

from api.authors.routes import router as authors_router
from api.books.routes import router as books_router
from api.borrowings.routes import router as borrowings_router
from api.categories.routes import router as categories_router
from api.returnings.routes import router as returnings_router
from api.shelves.routes import router as shelves_router
from api.users.routes import router as users_router


# Customize route id's
# Helpful for creating sensible names in the client
def custom_generate_unique_id(route: APIRoute):
    """ Generate unique route IDs based on route name """
    return f"{route.name}"  # these must be unique


# Create schema & router
app = FastAPI(
    title=get_settings().APP_NAME,
    lifespan=lifespan,
    generate_unique_id_function=custom_generate_unique_id
)

# CORS settings to allow client-server communication
# Set with env variable
origins = [get_settings().client_origin] if get_settings().client_origin else []

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Uploaded images, when kept on local disk
if get_settings().STORAGE_BACKEND.lower() == "local":
    app.mount(
        get_settings().STORAGE_PUBLIC_URL,
        StaticFiles(directory=get_settings().STORAGE_ROOT, check_dir=False),
        name="storage"
    )

# REST routers
# Add each api/feature folder here
API_PREFIX = "/api/v1"

app.include_router(authors_router, prefix=API_PREFIX)
app.include_router(books_router, prefix=API_PREFIX)
app.include_router(borrowings_router, prefix=API_PREFIX)
app.include_router(categories_router, prefix=API_PREFIX)
app.include_router(returnings_router, prefix=API_PREFIX)
app.include_router(shelves_router, prefix=API_PREFIX)
app.include_router(users_router, prefix=API_PREFIX)


# Health check endpoint for monitoring
@app.get("/api/health", tags=["health"])
def health_check():
    return {"status": "ok", "message": f"{get_settings().APP_NAME} API is running"}


if __name__ == "__main__":
    # For debugging purposes
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
