from typing import Any, Callable, TypeAlias

import numpy as np

Elements: TypeAlias = np.ndarray[tuple[int,], np.dtype[Any]]
UnaryFunc: TypeAlias = Callable[[Any], Any] | np.ufunc
BinaryFunc: TypeAlias = Callable[[Any, Any], Any] | np.ufunc
