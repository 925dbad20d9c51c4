from contextlib import asynccontextmanager

from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from config.settings import CHAIN_DIR, FERNET_KEY_FILE
from simplechain.blockchain import Blockchain
from simplechain.errors import BlockNotFound, StorageError
from simplechain.storage import ChainStorage


def create_app(blockchain: Blockchain | None = None) -> FastAPI:
    """
    Without `blockchain`, the app opens the encrypted chain storage from
    config.settings on startup and closes it on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if blockchain is not None:
            yield
            return

        storage = ChainStorage(CHAIN_DIR, FERNET_KEY_FILE).open()
        app.state.blockchain = Blockchain.initialize(storage)
        try:
            yield
        finally:
            storage.close()

    app = FastAPI(
        title="Simplechain API",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "*"
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if blockchain is not None:
        app.state.blockchain = blockchain

    def get_chain_engine(request: Request) -> Blockchain:
        return request.app.state.blockchain

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/chain")
    def get_chain(request: Request):
        return [block.to_dict() for block in get_chain_engine(request).blocks()]

    @app.get("/chain/latest")
    def get_latest_block(request: Request):
        chain = get_chain_engine(request).blocks()
        if not chain:
            return None
        return chain[-1].to_dict()

    @app.get("/chain/height")
    def get_height(request: Request):
        return {"height": get_chain_engine(request).height()}

    @app.get("/block/{height}")
    def get_block(height: int, request: Request):
        try:
            block = get_chain_engine(request).get_block(height)
        except BlockNotFound as e:
            raise HTTPException(status_code=404, detail=str(e))
        return block.to_dict()

    @app.post("/block")
    def add_block(request: Request, payload: dict = Body(...)):
        if "body" not in payload:
            return {"ok": False, "error": "Missing body"}

        try:
            block = get_chain_engine(request).append(payload["body"])
        except StorageError as e:
            return {"ok": False, "error": str(e)}

        return {"ok": True, "block": block.to_dict()}

    @app.get("/validate")
    def validate_chain(request: Request):
        errors = get_chain_engine(request).validate_chain()
        return {"valid": not errors, "errors": errors}

    @app.get("/validate/{height}")
    def validate_block(height: int, request: Request):
        try:
            valid = get_chain_engine(request).validate_block_at(height)
        except BlockNotFound as e:
            raise HTTPException(status_code=404, detail=str(e))
        return {"height": height, "valid": valid}

    return app


app = create_app()
