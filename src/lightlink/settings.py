"""Configuration of the light-time solver.

This module provides the LightTimeConvergenceSettings class, which holds the
convergence controls shared by every light-time calculator that a model
factory builds. Settings are loaded from a TOML file and can be overridden
with a dictionary of custom values.

Key Features:
- TOML file configuration loading
- Custom settings override capability
- Automatic validation of setting names
"""

import tomllib


class LightTimeConvergenceSettings:
    """Convergence controls of the light-time iteration.

    Attributes:
        tolerance (float):
            Absolute tolerance on the change of the light time between two
            iterates, in seconds. A floor of a few ulp of the light time is
            always applied on top of it.
        max_iterations (int):
            Number of iterates after which the solve is abandoned with a
            LightTimeConvergenceError.
        iterate_corrections (bool):
            Whether the correction stack is re-evaluated on every iterate
            (True) or only once, after the geometric light time has converged
            (False).
    """

    def __init__(self, toml_file=None, custom_settings=None):
        """Initialize the settings with defaults and optional overrides.

        Args:
            toml_file (str or pathlib.Path, optional):
                Path to a TOML file with a ``[light_time]`` table. Loaded after
                the defaults are set.
            custom_settings (dict, optional):
                Overrides applied after the TOML file. Keys must be existing
                attributes.

        Raises:
            AttributeError:
                If custom_settings contains a key that is not a setting.
            ValueError:
                If the resulting tolerance or iteration cap is not positive.
        """
        # Default settings
        self.tolerance = 1e-12
        self.max_iterations = 50
        self.iterate_corrections = True

        if toml_file:
            self.load_settings(toml_file)

        if custom_settings:
            for key, value in custom_settings.items():
                if hasattr(self, key):
                    setattr(self, key, value)
                else:
                    raise AttributeError(f"{key} is not a valid setting.")

        if self.tolerance <= 0.0:
            raise ValueError(f"tolerance must be positive, got {self.tolerance}.")
        if self.max_iterations < 1:
            raise ValueError(
                f"max_iterations must be at least 1, got {self.max_iterations}."
            )

    def __repr__(self):
        """Return a string listing every setting and its value."""
        attrs = vars(self)
        parts = ["LightTimeConvergenceSettings:"]
        for key, value in attrs.items():
            parts.append(f"  {key}: {value}")
        return "\n".join(parts)

    def load_settings(self, toml_file):
        """Load the ``[light_time]`` table of a TOML file.

        Only keys present in the file are updated.

        Example TOML structure:
            [light_time]
            tolerance = 1e-12
            max_iterations = 50
            iterate_corrections = true
        """
        with open(toml_file, "rb") as file:
            config = tomllib.load(file)

        if "light_time" in config:
            light_time = config["light_time"]
            if (tolerance := light_time.get("tolerance")) is not None:
                self.tolerance = float(tolerance)
            if (max_iterations := light_time.get("max_iterations")) is not None:
                self.max_iterations = int(max_iterations)
            if (iterate := light_time.get("iterate_corrections")) is not None:
                self.iterate_corrections = iterate
