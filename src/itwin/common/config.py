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

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

import dotenv

from itwin import logging

from .connector import APIConnector
from .interfaces import ITransport

logger = logging.getLogger("config")

__all__ = ["ServiceUrls"]

_ENV_KEYS = {
    "reporting": "ITWIN_REPORTING_URL",
    "carbon_calculation": "ITWIN_CARBON_CALCULATION_URL",
    "imodels": "ITWIN_IMODELS_URL",
    "projects": "ITWIN_PROJECTS_URL",
}


@dataclass(frozen=True, kw_only=True)
class ServiceUrls:
    """Base URLs of the iTwin Platform APIs."""

    reporting: str = "https://api.bentley.com/insights/reporting"
    """Base URL of the Reporting API."""

    carbon_calculation: str = "https://api.bentley.com/insights/carbon-calculation"
    """Base URL of the Carbon Calculation API."""

    imodels: str = "https://api.bentley.com/imodels"
    """Base URL of the iModels API."""

    projects: str = "https://api.bentley.com/projects"
    """Base URL of the Projects API."""

    @classmethod
    def from_env_file(cls, path: str | os.PathLike = ".env") -> ServiceUrls:
        """Load base URLs from a `.env` file.

        Recognised keys are `ITWIN_REPORTING_URL`, `ITWIN_CARBON_CALCULATION_URL`, `ITWIN_IMODELS_URL` and
        `ITWIN_PROJECTS_URL`. Missing or empty keys keep their default value.

        :param path: Path to the `.env` file. A missing file yields the default URLs.

        :return: The service URLs.
        """
        values = dotenv.dotenv_values(path, encoding="utf-8")
        return cls.from_mapping(values)

    @classmethod
    def from_mapping(cls, values: Mapping[str, str | None]) -> ServiceUrls:
        """Load base URLs from a mapping of environment variables, e.g., `os.environ`.

        :param values: The environment variables.

        :return: The service URLs.
        """
        kwargs: dict[str, Any] = {}
        for name, key in _ENV_KEYS.items():
            if value := values.get(key):
                logger.debug(f"Using {key}={value!r}")
                kwargs[name] = value
        return cls(**kwargs)

    def connector_for(
        self,
        service: str,
        transport: ITransport,
        additional_headers: Mapping[str, Any] | None = None,
    ) -> APIConnector:
        """Create a connector for one of the services.

        :param service: The service name, one of `reporting`, `carbon_calculation`, `imodels` or `projects`.
        :param transport: The transport to use for sending requests.
        :param additional_headers: Additional headers to include in each request.

        :return: A connector targeting the base URL of the service.

        :raises ValueError: If the service name is not known.
        """
        known = {f.name for f in fields(self)}
        if service not in known:
            raise ValueError(f"Unknown service {service!r}, expected one of {sorted(known)}")
        return APIConnector(getattr(self, service), transport, additional_headers=additional_headers)
