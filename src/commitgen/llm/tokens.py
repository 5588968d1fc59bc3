"""Token estimation for deciding how a diff is sent to the model."""

from contextlib import contextmanager
from typing import Iterator

import structlog
import tiktoken

logger = structlog.get_logger(__name__)

# Encoding used for models tiktoken does not know about yet
FALLBACK_ENCODING = "o200k_base"


@contextmanager
def tokenizer_for(model: str) -> Iterator[tiktoken.Encoding]:
    """Acquire a tokenizer for a model for the duration of a block.

    The handle is dropped when the block exits, whether it succeeds or raises.

    Args:
        model: Model name used to select the encoding

    Yields:
        A tiktoken Encoding
    """
    try:
        encoding = tiktoken.encoding_for_model(model)
    except KeyError:
        logger.warning("tokenizer_fallback", model=model, encoding=FALLBACK_ENCODING)
        encoding = tiktoken.get_encoding(FALLBACK_ENCODING)

    try:
        yield encoding
    finally:
        del encoding


def estimate_tokens(text: str, model: str) -> int:
    """Estimate how many tokens a text occupies for a model.

    Special-token markers inside the text are counted as plain text.

    Args:
        text: Text to measure
        model: Model name

    Returns:
        Number of tokens
    """
    with tokenizer_for(model) as encoding:
        return len(encoding.encode_ordinary(text))
