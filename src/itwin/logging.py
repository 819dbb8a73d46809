#  Copyright © 2025 Bentley Systems, Incorporated
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#      http://www.apache.org/licenses/LICENSE-2.0
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

"""Logging helpers for the iTwin SDK.

All SDK loggers live under the `itwin` logger, so that applications can configure the whole SDK at once:

    import logging
    logging.getLogger("itwin").setLevel(logging.DEBUG)

The SDK never installs handlers of its own.
"""

import logging

__all__ = ["getLogger"]

_ROOT = "itwin"

logging.getLogger(_ROOT).addHandler(logging.NullHandler())


def getLogger(name: str) -> logging.Logger:  # noqa: N802
    """Get a logger in the `itwin` hierarchy.

    :param name: The logger name, relative to the `itwin` logger. Names that already start with `itwin.` are used
        unchanged, so `getLogger(__name__)` works too.

    :return: The logger.
    """
    if name == _ROOT or name.startswith(_ROOT + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT}.{name}")
