# lambda_fleet_tool/prompts.py
"""
Interactive operator prompts
"""
import logging
import sys
from typing import Callable, List, Optional, Sequence, TextIO

from .errors import OperatorCancelled
from .models import FunctionRecord
from .reporting import function_label

logger = logging.getLogger(__name__)

CANCEL_WORDS = {'q', 'quit', 'cancel'}


def parse_selection(text: str, count: int) -> List[int]:
    """
    Parse '1,3-5' or 'all' into zero-based indices below count.
    Raises ValueError on anything else.
    """
    text = text.strip().lower()
    if text in ('all', '*'):
        return list(range(count))

    indices: List[int] = []
    for part in text.replace(' ', ',').split(','):
        if not part:
            continue
        if '-' in part:
            first, last = part.split('-', 1)
            start, end = int(first), int(last)
        else:
            start = end = int(part)
        if start < 1 or end > count or start > end:
            raise ValueError(f"Selection '{part}' is out of range 1-{count}")
        for number in range(start, end + 1):
            if number - 1 not in indices:
                indices.append(number - 1)
    return indices


class ConsolePrompter:
    """Blocking yes/no and multi-select prompts on the terminal"""

    def __init__(self, input_func: Callable[[str], str] = input, output: Optional[TextIO] = None):
        self.input_func = input_func
        self.output = output or sys.stdout

    def _ask(self, message: str) -> str:
        try:
            answer = self.input_func(message)
        except (EOFError, KeyboardInterrupt) as e:
            raise OperatorCancelled("Selection cancelled.") from e
        if answer.strip().lower() in CANCEL_WORDS:
            raise OperatorCancelled("Selection cancelled.")
        return answer

    def confirm(self, message: str, default: bool = True) -> bool:
        suffix = '[Y/n]' if default else '[y/N]'
        while True:
            answer = self._ask(f"{message} {suffix}: ").strip().lower()
            if not answer:
                return default
            if answer in ('y', 'yes'):
                return True
            if answer in ('n', 'no'):
                return False
            print("Please answer 'y' or 'n'.", file=self.output)

    def choose_functions(self, candidates: Sequence[FunctionRecord], target_runtime: str = '') -> List[str]:
        """Numbered multi-select; empty answer selects nothing, 'q' or Ctrl-C cancels"""
        print(f"\nSelect functions to upgrade to {target_runtime}:", file=self.output)
        for number, record in enumerate(candidates, start=1):
            print(f"  {number:>3}) {function_label(record)}", file=self.output)

        while True:
            answer = self._ask("Enter numbers (e.g. 1,3-5), 'all', or 'q' to cancel: ")
            if not answer.strip():
                return []
            try:
                indices = parse_selection(answer, len(candidates))
            except ValueError as e:
                print(f"Invalid selection: {e}", file=self.output)
                continue
            logger.debug(f"Operator selected {len(indices)} of {len(candidates)} function(s)")
            return [candidates[i].name for i in indices]
