"""Result type carrying task outcomes as values.

Example:
    >>> from reattempt.monads import Ok, Err
    >>> Ok(5).flat_map(lambda x: Ok(x + 1) if x > 0 else Err("negative")).unwrap()
    6
"""

from .result import Err, Ok, Result, sequence

__all__ = ["Result", "Ok", "Err", "sequence"]
