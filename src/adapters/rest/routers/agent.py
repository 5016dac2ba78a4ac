"""Agent endpoint: one request through decide → dispatch → finalize."""

from fastapi import APIRouter, Depends

from adapters.rest.dependencies import caller_profile, get_factory
from adapters.rest.schemas import RunBody, RunOut
from agent.memory import parse_history
from agent.state import PlainTextResult
from application.observers import LoggingObserver
from factory import ServiceFactory

router = APIRouter(tags=["agent"])


@router.post("/agent/run", response_model=RunOut)
async def run_agent(
    body: RunBody,
    factory: ServiceFactory = Depends(get_factory),
):
    # Executors serialize their own requests, so each HTTP request gets one.
    agent = factory.create_agent()
    history = parse_history((item.role, item.content) for item in body.chat_history)
    result = await agent.run(
        body.input,
        history,
        caller_profile(body.role, body.name),
        observer=LoggingObserver(),
    )
    if isinstance(result, PlainTextResult):
        return RunOut(type="plain_text", text=result.text)
    return RunOut(type="tool_result", tool=result.tool_name, payload=result.payload)
