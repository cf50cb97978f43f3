"""Configuration management for the min-conflicts solver and experiments.

This module provides a thin, explicit wrapper around a JSON configuration file
to centralize experiment settings, solver defaults and the list of strategies
compared by the experiment pipeline.

File format (high-level)
------------------------
- experiment_settings: N values, runs per N, output directory, base seed.
- solver_settings: default board size, variable/value selection, attempt cap,
  step multiplier and per-solve time limit.
- strategies: list of "<variable>/<value>" labels (e.g., ["most/row"]).

All methods return Python native types; semantic validation happens in
``minconflicts.analysis.cli.apply_configuration``.
"""
import json
from pathlib import Path


class ConfigManager:
    """Load, query, and persist the configuration file.

    Parameters
    ----------
    config_path : str | os.PathLike, default "config.json"
        Path to the configuration file.
    """

    def __init__(self, config_path="config.json"):
        self.config_path = Path(config_path)
        self.config = self.load_config()

    def load_config(self):
        """Load and parse the JSON configuration file.

        Returns
        -------
        dict
            Root configuration object.
        """
        if not self.config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {self.config_path}\n"
                f"Create it or use the default config.json template"
            )

        with open(self.config_path, 'r') as f:
            return json.load(f)

    def save_config(self):
        """Persist the current in-memory configuration to disk."""
        with open(self.config_path, 'w') as f:
            json.dump(self.config, f, indent=2)

    def get_experiment_settings(self):
        """Return experiment settings (sizes, runs, output dir, base seed)."""
        return self.config.get("experiment_settings", {})

    def get_solver_settings(self):
        """Return solver defaults (strategy, caps, step multiplier)."""
        return self.config.get("solver_settings", {})

    def get_strategies(self):
        """Return the strategy labels to compare (e.g., ["most/row"])."""
        return self.config.get("strategies", ["most/row"])

    def update_setting(self, section, key, value):
        """Update a specific setting and persist the change immediately."""
        if section not in self.config:
            self.config[section] = {}
        self.config[section][key] = value
        self.save_config()
