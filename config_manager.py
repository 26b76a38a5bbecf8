"""Configuration management for the min-conflicts experiment suite.

This module provides a thin, explicit wrapper around a JSON configuration file
to centralize experiment settings, timeouts, the restart-factor tuning grid,
solver defaults, and persisted tuned restart factors per board size.

File format (high-level)
------------------------
- experiment_settings: N values, run counts, base seed, and output directory.
- timeout_settings: per-solve time limit, restart cap, and experiment timeout.
- tuning_grid: candidate restart factors and runs per candidate.
- solver_settings: default restart factor and initial placement policy.
- optimal_parameters: mapping N -> {"restart_factor": k, ...}

All methods return Python native types; the class does not validate semantics
beyond presence of keys to keep responsibilities minimal.
"""
import json
from pathlib import Path


class ConfigManager:
    """Load, query, and persist configuration and tuned parameters.

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

        Raises
        ------
        FileNotFoundError
            When the file does not exist.
        ValueError
            When the file is not valid JSON or its root is not an object.
        """
        if not self.config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {self.config_path}\n"
                f"Create it or use the default config.json template"
            )

        with open(self.config_path, 'r') as f:
            try:
                config = json.load(f)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid JSON in {self.config_path}: {exc}") from exc
        if not isinstance(config, dict):
            raise ValueError(f"Configuration root must be an object: {self.config_path}")
        return config

    def save_config(self):
        """Persist the current in-memory configuration to disk."""
        with open(self.config_path, 'w') as f:
            json.dump(self.config, f, indent=2)

    def get_experiment_settings(self):
        """Return high-level experiment settings (sizes, runs, seed, output dir)."""
        return self.config.get("experiment_settings", {})

    def get_timeout_settings(self):
        """Return solve and experiment limits."""
        return self.config.get("timeout_settings", {})

    def get_tuning_grid(self):
        """Return restart-factor tuning grid settings."""
        return self.config.get("tuning_grid", {})

    def get_solver_settings(self):
        """Return solver defaults (restart factor, init policy)."""
        return self.config.get("solver_settings", {})

    def get_optimal_parameters(self):
        """Return stored tuned parameters as ``{N: {"restart_factor": k, ...}}``.

        JSON object keys are strings; they are returned as stored.
        """
        return self.config.get("optimal_parameters", {})

    def save_optimal_parameters(self, parameters):
        """Persist tuned parameters, merging them into any stored ones.

        Parameters
        ----------
        parameters : dict
            Mapping ``{N: {params}}`` produced by tuning.
        """
        stored = self.config.setdefault("optimal_parameters", {})
        for n, params in parameters.items():
            stored[str(n)] = params
        self.save_config()
        print(f"Optimal parameters saved to {self.config_path}")

    def has_optimal_parameters(self):
        """Return True if tuned parameters are stored."""
        return bool(self.config.get("optimal_parameters"))

    def update_setting(self, section, key, value):
        """Update a specific setting and persist the change immediately."""
        if section not in self.config:
            self.config[section] = {}
        self.config[section][key] = value
        self.save_config()
