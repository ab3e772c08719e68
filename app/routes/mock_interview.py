"""
WebSocket route for spoken mock interviews

Description:
Accepts a browser websocket and hands it to the mock interview handler, which
runs the session against the live speech endpoint.

Arguments:
- websocket: WebSocket connection object

Returns:
- None, but handles incoming messages and sends interviewer turns through the WebSocket connection.

Dependencies:
- fastapi: For handling WebSocket connections and dependencies.
- app.services.mock_interview.websocket_handler: For the session lifecycle.
- loguru: For logging information about the WebSocket connection and any exceptions that occur.
Author: @kcaparas1630

"""
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState
from sqlalchemy.orm import Session
from loguru import logger
from app.core.prompt_resolver import PromptResolver, get_prompt_resolver
from app.database import get_db_session
from app.services.mock_interview.websocket_handler import (
    ChannelFactory,
    default_channel_factory,
    handle_mock_interview_connection,
)

router = APIRouter(
    prefix="/api",
    tags=["mock-interview"],
    responses={404: {"description": "Not found"}}
)


def get_channel_factory() -> ChannelFactory:
    return default_channel_factory


@router.websocket("/mock-interview/ws")
async def mock_interview_websocket(
    websocket: WebSocket,
    db: Session = Depends(get_db_session),
    resolver: PromptResolver = Depends(get_prompt_resolver),
    channel_factory: ChannelFactory = Depends(get_channel_factory),
):
    await websocket.accept()
    try:
        await handle_mock_interview_connection(websocket, db, resolver, channel_factory)
    except WebSocketDisconnect:
        logger.info("Mock interview WebSocket connection closed")
        return
    except Exception as e:
        logger.exception("Unhandled exception in mock interview websocket connection")
        #1011 = internal error
        await websocket.close(code=1011, reason=str(e)[:123])
        raise

    if websocket.client_state == WebSocketState.CONNECTED:
        await websocket.close()
