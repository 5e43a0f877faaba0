from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from ara_notify.interfaces.api.routes import register_routes
from ara_notify.infrastructure.backend import BackendGateway
from ara_notify.infrastructure.database import SessionLocal, initialize_database, engine
from ara_notify.infrastructure.notifications import NotificationSessionManager
from ara_notify.infrastructure.realtime import ChangeFeedBroker


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Inicializa la base de datos al arrancar y cierra las sesiones abiertas al terminar."""

    initialize_database()
    yield
    await app.state.session_manager.close_all()
    engine.dispose()


def create_app() -> FastAPI:
    """Crea y configura la aplicación principal de FastAPI."""

    app = FastAPI(lifespan=lifespan)
    app.state.broker = ChangeFeedBroker()
    app.state.gateway = BackendGateway(SessionLocal)
    app.state.session_manager = NotificationSessionManager()

    # Autoriza peticiones desde el cliente web de ARA.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
