# LLM access for the quiz pipeline; wraps a LangChain chat model in a forced function (tool) call
# quizcards/services/llm_client.py
import json
import threading
from typing import Optional, Protocol

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from quizcards.utils.config import Settings, settings, validate_llm_credentials
from quizcards.utils.logger import logger

# --- Lazily initialized shared client ---
_llm_client = None
_init_lock = threading.Lock()


class FunctionCallingLLM(Protocol):
    async def call_function(self, system: str, user: str, function: dict) -> Optional[str]:
        """Returns the raw JSON arguments of the forced function call, or None if the model did not call it."""
        ...


def extract_function_arguments(message: AIMessage, function_name: str) -> Optional[str]:
    """Pulls the argument string of a named tool call out of a chat model reply."""
    for call in getattr(message, "tool_calls", None) or []:
        if call.get("name") == function_name:
            return json.dumps(call.get("args", {}))

    # Calls whose arguments the provider could not decode keep their raw text here
    for call in getattr(message, "invalid_tool_calls", None) or []:
        if call.get("name") in (None, function_name):
            return call.get("args")

    legacy_call = (getattr(message, "additional_kwargs", None) or {}).get("function_call")
    if legacy_call and legacy_call.get("name") == function_name:
        return legacy_call.get("arguments")

    return None


class LangChainFunctionCaller:
    """
    Calls a chat model with a single tool that the model is forced to use.

    Provider errors (timeouts, rate limits, 5xx) are retried with exponential
    backoff and jitter, up to max_attempts calls in total. Whatever is still
    failing after that is raised to the caller. Replies are never retried here:
    a malformed reply is returned as-is for the parser to reject.
    """

    def __init__(self, chat_model: BaseChatModel, max_attempts: int = 1):
        self.chat_model = chat_model
        self.max_attempts = max(1, max_attempts)

    async def call_function(self, system: str, user: str, function: dict) -> Optional[str]:
        function_name = function["name"]
        runnable = self.chat_model.bind_tools(
            [{"type": "function", "function": function}],
            tool_choice=function_name,
        )
        if self.max_attempts > 1:
            runnable = runnable.with_retry(
                stop_after_attempt=self.max_attempts,
                wait_exponential_jitter=True,
            )

        logger.debug(f"--- PROMPT FOR {function_name} ---\n{system}\n\n{user}\n---------------------------")
        message = await runnable.ainvoke([SystemMessage(content=system), HumanMessage(content=user)])

        arguments = extract_function_arguments(message, function_name)
        if arguments is None:
            logger.warning(f"LLM reply did not contain a '{function_name}' function call")
        return arguments


def build_chat_model(config: Settings) -> BaseChatModel:
    """Creates the chat model for the configured provider. Client-side retries are disabled; the caller retries."""
    validate_llm_credentials(config)
    provider = config.llm_provider.lower()
    if provider == "openai":
        return ChatOpenAI(
            api_key=config.openai_api_key,
            model=config.openai_model_name,
            temperature=config.llm_temperature,
            timeout=config.llm_timeout_seconds,
            max_retries=0,
        )
    if provider == "google":
        return ChatGoogleGenerativeAI(
            google_api_key=config.google_api_key,
            model=config.google_model_name,
            temperature=config.llm_temperature,
            timeout=config.llm_timeout_seconds,
            max_retries=0,
        )
    raise ValueError(f"Unsupported LLM_PROVIDER: {config.llm_provider}")


def get_llm_client(config: Optional[Settings] = None) -> LangChainFunctionCaller:
    """Returns the shared function caller, creating it on first use."""
    global _llm_client

    if config is not None:
        return LangChainFunctionCaller(build_chat_model(config), max_attempts=config.llm_max_retries)

    with _init_lock:
        if _llm_client is None:
            logger.info(f"Initializing LLM client for provider: {settings.llm_provider}")
            _llm_client = LangChainFunctionCaller(build_chat_model(settings), max_attempts=settings.llm_max_retries)
            logger.info(f"Initialized LLM with provider {settings.llm_provider}")
        return _llm_client
