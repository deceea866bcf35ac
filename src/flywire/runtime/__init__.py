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
"""Flywire runtime — markers and base types imported by application code."""

from flywire.runtime.context import (
    NO_OP_INJECTOR,
    UNSUPPORTED_KEY,
    Injectable,
    NoOpInjector,
    ResolverContext,
    TypeInjector,
    type_identity,
)
from flywire.runtime.markers import Inject, InjectKeyed, exclude_from_injection_generation
from flywire.runtime.provider import ServiceProvider

__all__ = [
    "Inject",
    "InjectKeyed",
    "Injectable",
    "NO_OP_INJECTOR",
    "NoOpInjector",
    "ResolverContext",
    "ServiceProvider",
    "TypeInjector",
    "UNSUPPORTED_KEY",
    "exclude_from_injection_generation",
    "type_identity",
]
