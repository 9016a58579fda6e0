"""Current moisture reading endpoint."""

from starlette.requests import Request
from starlette.responses import JSONResponse

from soilmon.lib.store import ReadingStore


async def get_moisture(request: Request) -> JSONResponse:
    """Return the latest reading with its plant recommendations."""
    store: ReadingStore = request.app.state.store
    return JSONResponse(store.get().to_dict())
