"""
Configuration manager for the speedometer motion pipeline.
"""

import copy
import json
import os
from typing import Dict, Any, Optional

from .math.units import Units, parse_units

UNIT_SWITCH_POLICIES = ("keep", "rescale")

class Config:
    """Configuration manager for the motion pipeline."""
    
    DEFAULT_CONFIG = {
        # Speed filter parameters
        "filter": {
            "measurement_noise": 0.01,
            "process_noise": 3.0,
            "state_transition": 1.0,
            "control_gain": 0.0
        },
        
        # Display units
        "units": "metric",
        
        # What happens to accumulated stats when units change:
        # "keep" leaves the numbers as they are, "rescale" converts them
        "unit_switch_policy": "keep",
        
        # Accelerometer axis routed to the filter predict step
        "accelerometer_axis": "x",
        
        # Requested location update interval for collaborators
        "location_interval_ms": 1000,
        
        # Print a status line for every processed fix
        "verbose": False
    }
    
    def __init__(self, config_file: Optional[str] = "speedo.json"):
        """
        Initialize configuration.
        
        Args:
            config_file: Path to configuration file, or None to use defaults only
        """
        self.config_file = config_file
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        
        if config_file is None:
            return
        
        # Load configuration from file if it exists
        if os.path.exists(config_file):
            self.load_config()
        else:
            print(f"Config file {config_file} not found, using defaults")
            self.save_config()  # Create default config file
    
    def load_config(self) -> bool:
        """
        Load configuration from file.
        
        Returns:
            True if loaded successfully
        """
        try:
            with open(self.config_file, 'r') as f:
                file_config = json.load(f)

            if not isinstance(file_config, dict):
                raise ValueError(f"expected a JSON object, got {type(file_config).__name__}")

            # Merge with defaults (file config overrides defaults)
            merged = copy.deepcopy(self.config)
            self._merge_config(merged, file_config)
            self.config = merged

            print(f"Configuration loaded from {self.config_file}")
            return True
            
        except (OSError, ValueError) as e:
            print(f"Failed to load config: {e}")
            return False
    
    def save_config(self) -> bool:
        """
        Save current configuration to file.
        
        Returns:
            True if saved successfully
        """
        if self.config_file is None:
            return False
        
        try:
            with open(self.config_file, 'w') as f:
                json.dump(self.config, f, indent=2)
            
            print(f"Configuration saved to {self.config_file}")
            return True
            
        except OSError as e:
            print(f"Failed to save config: {e}")
            return False
    
    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]):
        """Recursively merge configuration dictionaries."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value
    
    def get(self, key: str, default=None):
        """Get configuration value with optional default."""
        keys = key.split('.')
        value = self.config
        
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        
        return value
    
    def set(self, key: str, value: Any):
        """Set configuration value."""
        keys = key.split('.')
        config = self.config
        
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]
        
        config[keys[-1]] = value
    
    # Property accessors for common configuration values
    @property
    def measurement_noise(self) -> float:
        return float(self.config["filter"]["measurement_noise"])
    
    @property
    def process_noise(self) -> float:
        return float(self.config["filter"]["process_noise"])
    
    @property
    def state_transition(self) -> float:
        return float(self.config["filter"]["state_transition"])
    
    @property
    def control_gain(self) -> float:
        return float(self.config["filter"]["control_gain"])
    
    @property
    def units(self) -> Units:
        return parse_units(self.config["units"])
    
    @property
    def unit_switch_policy(self) -> str:
        policy = self.config["unit_switch_policy"]
        if policy not in UNIT_SWITCH_POLICIES:
            raise ValueError(f"Unknown unit switch policy: {policy}")
        return policy
    
    @property
    def accelerometer_axis(self) -> str:
        return self.config["accelerometer_axis"]
    
    @property
    def location_interval_ms(self) -> int:
        return int(self.config["location_interval_ms"])
    
    @property
    def verbose(self) -> bool:
        return bool(self.config["verbose"])
    
    def print_config(self):
        """Print current configuration."""
        print("=== Speedometer Configuration ===")
        print(json.dumps(self.config, indent=2))
