import json
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from starlette.websockets import WebSocketState

from ..core.errors import BudgetExceededError, CalmChefError, ChefServiceError
from ..core.pacing import PacingTracker
from ..core.state_machine import CookingSession
from ..core.timer_manager import TimerManager
from ..core.voice import Command, classify_command
from ..models.recipe import ChatMessage, Recipe, Timer
from ..services.openai_client import ChefClient
from ..services.recipe_parser import RecipeParser
from ..services.storage import ChefStore
from .routes import get_chef_client, get_store

log = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1")

ACTIONS = {
    "next": Command.NEXT,
    "back": Command.BACK,
    "repeat": Command.REPEAT,
    "timer": Command.START_TIMER,
    "pause": Command.PAUSE_TIMER,
    "resume": Command.RESUME_TIMER,
}


async def load_recipe(text: str) -> Recipe:
    """The first frame is either recipe JSON or raw recipe text."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return await RecipeParser.parse(text)
    if isinstance(payload, dict) and "recipe" in payload:
        payload = payload["recipe"]
    return Recipe.model_validate(payload)


@router.websocket("/ws")
async def websocket_endpoint(
    ws: WebSocket,
    chef: Optional[str] = None,
    client: ChefClient = Depends(get_chef_client),
    store: ChefStore = Depends(get_store),
):
    log.info("🔗 New cooking session connection")
    await ws.accept()

    async def send(message: dict):
        if ws.application_state == WebSocketState.CONNECTED:
            await ws.send_json(message)
        else:
            log.warning("❌ WebSocket not connected, message dropped")

    async def tts(text: str):
        log.info(f"🔊 {text[:100]}{'...' if len(text) > 100 else ''}")
        await send({"tts": text})

    try:
        raw_recipe = await ws.receive_text()
        try:
            recipe = await load_recipe(raw_recipe)
        except ValidationError as e:
            log.error(f"❌ Invalid recipe: {e}")
            await send({"error": "Received incomplete recipe data."})
            await ws.close()
            return
        log.info(f"✅ Recipe loaded: {recipe.title} ({len(recipe.steps)} steps)")
        await send({"type": "recipe_received", "recipe": recipe.model_dump(mode="json", by_alias=True)})

        pacing = store.load_pacing(chef) if chef else PacingTracker()
        chef_name = (store.get(chef, "chefName") or chef) if chef else ""

        async def push_state():
            await send({"state": session.snapshot()})

        async def alert(timer: Timer):
            await send({"alert": f"{timer.label} is ready.", "timerId": timer.id})
            await tts(f"{timer.label} is ready.")

        timers = TimerManager(recipe, tts, on_tick=push_state, on_alert=alert)
        session = CookingSession(recipe, tts, pacing=pacing, chef_name=chef_name, timers=timers)
        history: List[ChatMessage] = []

        ready_signal = await ws.receive_text()
        if ready_signal != "READY":
            log.warning(f"⚠️ Expected 'READY' signal, got: '{ready_signal}'")
        await session.reset()
        await push_state()
        timers.start()

        try:
            while True:
                text = await ws.receive_text()
                try:
                    message = json.loads(text)
                except json.JSONDecodeError:
                    message = {"type": "command", "text": text}
                if not isinstance(message, dict):
                    message = {"type": "command", "text": str(message)}

                question = None
                kind = message.get("type", "command")
                if kind == "command":
                    transcript = str(message.get("text", ""))
                    command = classify_command(transcript)
                    log.info(f"🎯 Classified '{transcript}' as {command.value}")
                    question = await session.handle(command, transcript)
                elif kind == "action":
                    action = message.get("action")
                    if action == "dismiss":
                        timers.remove(message.get("timerId"))
                    elif action == "toggle":
                        timers.toggle(message.get("timerId", session.current_step.id))
                    elif action in ACTIONS:
                        await session.handle(ACTIONS[action])
                    else:
                        await send({"error": f"Unknown action: {action}"})
                elif kind == "chat":
                    question = str(message.get("text", ""))
                else:
                    await send({"error": f"Unknown message type: {kind}"})

                if question:
                    history.append(ChatMessage(role="user", content=question))
                    try:
                        reply = await client.chat(history, session.current_step.instruction)
                    except BudgetExceededError:
                        history.pop()
                        await send({"error": "Budget limit reached."})
                    except ChefServiceError as e:
                        history.pop()
                        log.error(f"💥 Chat error: {e}")
                        await send({"error": "Susie is having trouble connecting. Please try again."})
                    else:
                        history.append(ChatMessage(role="assistant", content=reply))
                        await send({"reply": reply})
                        await tts(reply)

                await push_state()
        finally:
            if chef:
                store.save_pacing(chef, session.pacing)
            await timers.cancel_all()
            log.info("🛑 Timers cancelled")

    except WebSocketDisconnect:
        log.info("👋 Client disconnected")
    except CalmChefError as e:
        log.error(f"💥 Cooking session error: {e}")
        await send({"error": str(e)})
        await ws.close()
