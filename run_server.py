import os

import uvicorn

if __name__ == "__main__":
    host = os.environ.get("PROJECTOR_HOST", "0.0.0.0")
    port = int(os.environ.get("PROJECTOR_PORT", "8000"))

    print("Starting Projector Query API...")
    print(f"Docs available at: http://localhost:{port}/docs")
    db_path = os.environ.get("PROJECTOR_DB_PATH")
    if db_path:
        print(f"Serving sqlite store: {db_path}")
    else:
        print("[!] PROJECTOR_DB_PATH is not set; serving an empty in-memory store")

    uvicorn.run(
        "projector.api.server:app",
        host=host,
        port=port,
        reload=True
    )
