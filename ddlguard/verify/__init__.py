from .verifier import verify_output

__all__ = ["verify_output"]
