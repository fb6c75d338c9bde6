import sys
from pathlib import Path

# Add the project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))


def main():
    from config import Settings, ConfigurationError
    from api.server import run_server

    settings = Settings.from_env()

    print("\n" + "═" * 65)
    print(f"  Server starting on http://{settings.HOST}:{settings.PORT}")
    print(f"  Prompts:    {settings.prompts_path}")
    print(f"  Embeddings: {settings.embeddings_path}")
    print("═" * 65 + "\n")

    try:
        run_server(settings)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
