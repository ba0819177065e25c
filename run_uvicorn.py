# run_uvicorn.py
# Local launcher (no uvicorn reload subprocess), handy for debugging in an IDE.
import os

# Safe defaults so import-time DB code doesn't explode if env vars are missing.
os.environ.setdefault("DATABASE_URL", "sqlite:///./bioskop.db")
os.environ.setdefault("MIDTRANS_IS_PRODUCTION", "false")

from bioskop.main import app  # noqa: E402

if __name__ == "__main__":
    import uvicorn

    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "3000"))
    uvicorn.run(app, host=host, port=port, reload=False)
