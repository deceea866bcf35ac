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
"""ServiceProvider — the registry contract generated injectors call into."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ServiceProvider(Protocol):
    """Port implemented by the application's service registry.

    ``get_required_*`` raise the registry's own unresolved-dependency error;
    the other lookups return ``None`` (or an empty iterable) instead.
    """

    def get_service(self, service_type: Any) -> Any: ...
    def get_required_service(self, service_type: Any) -> Any: ...
    def get_keyed_service(self, service_type: Any, key: Any) -> Any: ...
    def get_required_keyed_service(self, service_type: Any, key: Any) -> Any: ...
    def get_services(self, service_type: Any) -> Iterable[Any]: ...
    def get_keyed_services(self, service_type: Any, key: Any) -> Iterable[Any]: ...
