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
"""Flywire — build-time generated field injection."""

from flywire.runtime import (
    NO_OP_INJECTOR,
    Inject,
    Injectable,
    InjectKeyed,
    ResolverContext,
    ServiceProvider,
    TypeInjector,
    exclude_from_injection_generation,
)

__version__ = "0.1.0"

__all__ = [
    "Inject",
    "InjectKeyed",
    "Injectable",
    "NO_OP_INJECTOR",
    "ResolverContext",
    "ServiceProvider",
    "TypeInjector",
    "__version__",
    "exclude_from_injection_generation",
]
