"""Configuration flow for the Houseplant Manager integration.

The config flow creates the single Houseplant Manager entry. The options flow
sets where reminders go, at what time of day they fire, and which watering
rule table is used.
"""

from __future__ import annotations

import logging
from typing import Any

import homeassistant.helpers.config_validation as cv
import voluptuous as vol
from homeassistant import config_entries
from homeassistant.config_entries import (
    ConfigEntry,
    ConfigFlowResult,
    OptionsFlow,
)
from homeassistant.core import callback

from .const import (
    CONF_NOTIFICATION_TARGET,
    CONF_REMINDER_TIME,
    CONF_RULE_TABLE_PATH,
    DEFAULT_NAME,
    DOMAIN,
)
from .exceptions import RuleTableError
from .rule_table import WateringRuleTable
from .utils import parse_reminder_time

_LOGGER = logging.getLogger(__name__)

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Optional("name", default=DEFAULT_NAME): cv.string,
    }
)


class ConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle the initial configuration flow for Houseplant Manager."""

    VERSION = 1
    MINOR_VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the first step of the configuration flow.

        Args:
            user_input: The user's input from the form, if any.

        Returns:
            A ConfigFlowResult indicating the next step or completion.
        """
        await self.async_set_unique_id(DOMAIN)
        self._abort_if_unique_id_configured()

        if user_input is None:
            return self.async_show_form(
                step_id="user", data_schema=STEP_USER_DATA_SCHEMA
            )

        return self.async_create_entry(
            title=user_input.get("name", DEFAULT_NAME), data={}
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry: ConfigEntry) -> OptionsFlowHandler:
        """Get the options flow for this handler."""
        return OptionsFlowHandler(config_entry)


class OptionsFlowHandler(OptionsFlow):
    """Handles the options flow for Houseplant Manager."""

    def __init__(self, config_entry: ConfigEntry) -> None:
        """Initialize the options flow handler.

        Args:
            config_entry: The configuration entry.
        """
        self._config_entry = config_entry
        self._current_options: dict[str, Any] = self._config_entry.options.copy()

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Show and validate the options form.

        Args:
            user_input: The submitted options, if any.

        Returns:
            A ConfigFlowResult with the form or the saved options.
        """
        errors: dict[str, str] = {}

        if user_input is not None:
            options = {k: v for k, v in user_input.items() if v not in (None, "")}

            try:
                parse_reminder_time(options.get(CONF_REMINDER_TIME))
            except ValueError:
                errors[CONF_REMINDER_TIME] = "invalid_reminder_time"

            rule_path = options.get(CONF_RULE_TABLE_PATH)
            if rule_path:
                try:
                    await WateringRuleTable.async_load(
                        self.hass, self.hass.config.path(rule_path)
                    )
                except RuleTableError as err:
                    _LOGGER.warning("Rejected rule table %s: %s", rule_path, err)
                    errors[CONF_RULE_TABLE_PATH] = "invalid_rule_table"

            if not errors:
                return self.async_create_entry(title="", data=options)

        return self.async_show_form(
            step_id="init",
            data_schema=self._options_schema(),
            errors=errors,
        )

    def _options_schema(self) -> vol.Schema:
        """Build the options schema with the current values as suggestions."""
        current = self._current_options
        return vol.Schema(
            {
                vol.Optional(
                    CONF_NOTIFICATION_TARGET,
                    description={
                        "suggested_value": current.get(CONF_NOTIFICATION_TARGET)
                    },
                ): cv.string,
                vol.Optional(
                    CONF_REMINDER_TIME,
                    description={"suggested_value": current.get(CONF_REMINDER_TIME)},
                ): cv.string,
                vol.Optional(
                    CONF_RULE_TABLE_PATH,
                    description={"suggested_value": current.get(CONF_RULE_TABLE_PATH)},
                ): cv.string,
            }
        )
