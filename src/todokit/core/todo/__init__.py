from .changelog import Changelog, complete_task
from .document import TodoDocument, dump_block, extract_yaml_blocks
from .store import DocumentTaskStore

__all__ = ["Changelog", "DocumentTaskStore", "TodoDocument", "complete_task", "dump_block", "extract_yaml_blocks"]
