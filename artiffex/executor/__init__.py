"""Node Executor - prompt dispatch and asynchronous generation per node."""
from .executor import NodeExecutor, GenerationTicket, EMPTY_PROMPT_MESSAGE
from .artifacts import to_data_url, from_data_url

__all__ = ["NodeExecutor", "GenerationTicket", "EMPTY_PROMPT_MESSAGE", "to_data_url", "from_data_url"]
