import json
from pathlib import Path
from typing import Any, Dict

DEFAULT_CONFIG: Dict[str, Any] = {
    "compiler_path": "",
    "compiler_args": "",
    "compile_on_save": False,
    "show_output_on_compile": True,
    "timeout": 30,
    "artifact_candidates": [],
}


class ConfigManager:
    """
    User settings stored as JSON in ~/.cplebolt/config.json.
    Values in the file override DEFAULT_CONFIG key by key.
    """

    def __init__(self, config_dir: Path = None):
        self.config_dir = Path(config_dir) if config_dir else Path.home() / ".cplebolt"
        self.config_file = self.config_dir / "config.json"
        self.config = self.load_config()

    def load_config(self) -> Dict[str, Any]:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        config = DEFAULT_CONFIG.copy()
        # lists must not be shared with DEFAULT_CONFIG
        config["artifact_candidates"] = list(DEFAULT_CONFIG["artifact_candidates"])

        if not self.config_file.exists():
            return config

        try:
            with open(self.config_file, "r") as f:
                user_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            print(f"Warning: Ignoring unreadable config {self.config_file}: {e}")
            return config

        if isinstance(user_config, dict):
            config.update(user_config)
        return config

    def save_config(self):
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w") as f:
            json.dump(self.config, f, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def set(self, key: str, value: Any):
        self.config[key] = value
        self.save_config()
