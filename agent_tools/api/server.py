from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from typing import Any, Dict, List, Optional
import logging
import asyncio

from langchain_core.tools import BaseTool

from agent_tools import __version__
from agent_tools.core.config import get_settings
from agent_tools.tools.code_exec import CodeExecutionInput
from agent_tools.tools.registry import EXECUTE_CODE, GET_WEATHER, create_tools, describe_tools
from agent_tools.tools.weather import ForecastInput

# Configure logging
logging.basicConfig(level=get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Agent Tools API", version=__version__)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global State
class SystemState:
    def __init__(self):
        self.tools: List[BaseTool] = []
        self.initialized = False

    @property
    def tools_by_name(self) -> Dict[str, BaseTool]:
        return {t.name: t for t in self.tools}

    def get_tool(self, name: str) -> BaseTool:
        tool = self.tools_by_name.get(name)
        if tool is None:
            raise HTTPException(status_code=404, detail=f"Tool '{name}' not found")
        return tool

state = SystemState()

@app.on_event("startup")
async def startup_event():
    logger.info("Initializing agent tools...")
    state.tools = create_tools(get_settings())
    state.initialized = True
    logger.info(f"Tools ready: {', '.join(t.name for t in state.tools) or 'none'}")

async def _invoke(tool: BaseTool, args: Dict[str, Any]) -> Dict[str, Any]:
    # Blocking tool bodies run in a worker thread
    try:
        return await asyncio.to_thread(tool.invoke, args)
    except ValidationError as e:
        raise HTTPException(
            status_code=422, detail=e.errors(include_url=False, include_context=False)
        )

# --- Endpoints ---

@app.get("/api/health")
async def health_check():
    return {
        "status": "healthy",
        "initialized": state.initialized,
        "tools": [t.name for t in state.tools],
    }

@app.get("/api/tools")
async def list_tools():
    return describe_tools(state.tools)

@app.post("/api/tools/execute_code")
async def tool_execute_code(req: CodeExecutionInput):
    return await _invoke(state.get_tool(EXECUTE_CODE), req.model_dump())

@app.post("/api/tools/weather")
async def tool_weather(req: ForecastInput):
    return await _invoke(state.get_tool(GET_WEATHER), req.model_dump(exclude_none=True))

@app.post("/api/tools/{name}/invoke")
async def invoke_tool(name: str, args: Optional[Dict[str, Any]] = None):
    tool = state.get_tool(name)
    logger.info(f"Invoke by name: {name}")
    return await _invoke(tool, args or {})

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
