from dataclasses import asdict

from dbexport.config import ExportOptions

SECRET_OPTIONS = ("password",)


class ConfigCommand:
    @staticmethod
    def add_arguments(parser):
        parser.add_argument(
            "--effective",
            action="store_true",
            help="Also show the options parsed from the file, with defaults applied"
        )

    @staticmethod
    def execute(config_path, args):
        print(f"Configuration file: {config_path}")

        if config_path.exists():
            print(f"Status: Found")
            with open(config_path, 'r') as f:
                content = f.read().strip()
                if content:
                    print("Contents:")
                    print(mask_secrets(content))
                else:
                    print("Contents: (empty)")
        else:
            print("Status: Not found")
            print("Create a config.toml file with your settings.")
            return

        if getattr(args, "effective", False):
            options = ExportOptions.from_file(config_path)
            print("\nEffective options:")
            for name, value in asdict(options).items():
                if name in SECRET_OPTIONS and value is not None:
                    value = "*****"
                print(f"  {name}: {value}")


def mask_secrets(content: str) -> str:
    """Hide literal passwords when echoing a config file."""
    lines = []
    for line in content.splitlines():
        key = line.split("=", 1)[0].strip()
        if "=" in line and key in SECRET_OPTIONS:
            line = f"{line.split('=', 1)[0]}= \"*****\""
        lines.append(line)
    return "\n".join(lines)
