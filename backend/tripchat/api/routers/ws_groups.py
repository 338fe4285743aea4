# tripchat/api/routers/ws_groups.py
import json
import logging
from fastapi import APIRouter, WebSocket, status
from starlette.websockets import WebSocketDisconnect
from tripchat.core.pubsub import channel_name

logger = logging.getLogger("uvicorn.error")

router = APIRouter()

@router.websocket("/ws/groups")
async def ws_groups(ws: WebSocket):
    """
    WebSocket endpoint for live group messages.

    Message flow:
    1. Client connects to WebSocket
    2. Client sends: {"type": "joinGroup", "groupId": "..."} (any number of groups)
    3. Server subscribes the socket and replies: {"type": "joinedGroup", "groupId": "..."}
    4. Every message posted to a joined group arrives as:
       {"type": "newMessage", "groupId": "...", "message": {sender, text, timestamp}}

    Subscriptions last for this connection only; after a reconnect the client
    has to join again. Messages posted before joining are not replayed.
    """
    broadcaster = ws.app.state.broadcaster
    await ws.accept()
    socket_id = await broadcaster.connect(ws)
    logger.info("[ws_groups] connected %s", socket_id)
    try:
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", status.WS_1000_NORMAL_CLOSURE))
            raw = message.get("text")
            if raw is None:
                # Text frames only
                logger.info("[ws_groups] closing %s: binary frame", socket_id)
                await ws.close(code=status.WS_1003_UNSUPPORTED_DATA)
                break
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                await ws.send_text(json.dumps({"type": "error", "code": "BAD_JSON"}))
                continue
            if not isinstance(msg, dict):
                await ws.send_text(json.dumps({"type": "error", "code": "BAD_JSON"}))
                continue

            if msg.get("type") == "joinGroup":
                group_id = msg.get("groupId")
                if not group_id:
                    await ws.send_text(json.dumps({"type": "error", "code": "GROUP_ID_REQUIRED"}))
                    continue
                await broadcaster.subscribe(socket_id, group_id)
                logger.info("[ws_groups] %s joined group %s", socket_id, group_id)
                await ws.send_text(json.dumps({"type": "joinedGroup", "groupId": channel_name(group_id)}))
            else:
                await ws.send_text(json.dumps({"type": "error", "code": "UNKNOWN_TYPE"}))
    except WebSocketDisconnect:
        logger.info("[ws_groups] disconnected %s", socket_id)
    except Exception as e:
        logger.warning("[ws_groups] error on %s: %r", socket_id, e)
    finally:
        await broadcaster.unsubscribe_all(socket_id)
