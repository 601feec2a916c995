import os

import uvicorn


def main():
    """Serve the catalog API (python -m pokedex)."""
    uvicorn.run(
        "pokedex.main:app",
        host=os.getenv("POKEDEX_HOST", "127.0.0.1"),
        port=int(os.getenv("POKEDEX_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
