# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Key Literal Formatter — renders a service key as Python source text."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any

UNSUPPORTED_KEY_LITERAL = "UNSUPPORTED_KEY"


@dataclass(frozen=True)
class UnsupportedKey:
    """A key argument that is not a literal the generator can reproduce.

    ``source`` keeps the original expression text for diagnostics and logs.
    """

    source: str = ""


def format_key_literal(value: Any) -> str:
    """Render *value* as a Python literal for the generated module.

    ``str`` keys are double-quoted with escapes; strings holding lone
    surrogates fall back to ``repr`` so the module stays UTF-8 encodable.
    Non-finite floats use the ``float("...")`` spelling since they have no
    literal form. Anything that is
    not ``None``, ``bool``, ``int``, ``float`` or ``str`` renders as
    ``UNSUPPORTED_KEY``, the runtime sentinel the generated module imports.
    """
    if value is None:
        return "None"
    # bool before int: bool is an int subclass.
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return 'float("nan")'
        if math.isinf(value):
            return 'float("inf")' if value > 0 else 'float("-inf")'
        return repr(value)
    if isinstance(value, str):
        return _string_literal(value)
    return UNSUPPORTED_KEY_LITERAL


def _string_literal(value: str) -> str:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        # Lone surrogates cannot be written to a UTF-8 file; repr escapes them.
        return repr(value)
    return json.dumps(value, ensure_ascii=False)


def is_unsupported(literal: str) -> bool:
    return literal == UNSUPPORTED_KEY_LITERAL
