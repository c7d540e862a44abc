# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
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

"""
Concurrent dispatch of independent per-item operations.
"""
import concurrent.futures
from typing import Callable, Iterable, List, Optional, TypeVar
from ..MODELS.operation_result import OperationResult
from ..UTILS import console

T = TypeVar("T")

class FanOut:
    """
    Maps one operation over independent items on a thread pool.

    Every item is attempted. A failure in one item is reported and recorded
    but never cancels or delays its siblings. There is no timeout.
    """
    def __init__(self, max_workers: Optional[int] = None):
        """
        :param max_workers: Pool size. ``None`` uses the executor's default.
        """
        self.max_workers = max_workers

    def map(self,
            operation: Callable[[T], object],
            items: Iterable[T],
            name_of: Callable[[T], str] = str) -> List[OperationResult]:
        """
        Runs ``operation`` on every item and waits for all of them.

        :param operation: Called once per item. A raised exception marks the item failed.
        :param items: Independent work items.
        :param name_of: Label for an item in results and messages.
        :return: One result per item, in input order.
        """
        items = list(items)
        if not items:
            return []

        results: List[Optional[OperationResult]] = [None] * len(items)
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = {pool.submit(operation, item): i for i, item in enumerate(items)}
            for future in concurrent.futures.as_completed(futures):
                index = futures[future]
                name = name_of(items[index])
                try:
                    future.result()
                except Exception as e:
                    console.warn(f"{name}: {e}")
                    results[index] = OperationResult.failed(name, str(e))
                else:
                    results[index] = OperationResult.ok(name)
        return results
