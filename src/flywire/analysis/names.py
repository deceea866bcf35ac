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
"""Names of the runtime symbols the analysis recognises in user code."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_NAMESPACES = frozenset(
    {
        "flywire",
        "flywire.runtime",
        "flywire.runtime.context",
        "flywire.runtime.markers",
        "flywire.runtime.provider",
    }
)


@dataclass(frozen=True)
class RuntimeNames:
    """Simple names of the markers and base types, plus the namespaces they live in.

    Matching is nominal: a reference counts when its last segment equals the
    configured name and everything before it is one of ``namespaces``.
    """

    namespaces: frozenset[str] = DEFAULT_NAMESPACES
    injectable: str = "Injectable"
    resolver_context: str = "ResolverContext"
    inject: str = "Inject"
    inject_keyed: str = "InjectKeyed"
    exclude: str = "exclude_from_injection_generation"
    service_provider: str = "ServiceProvider"
