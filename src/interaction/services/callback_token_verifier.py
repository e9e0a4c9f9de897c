import hmac


class CallbackTokenVerifier:
    def __init__(self, verification_token: str):
        self.verification_token = verification_token or ""

    def verify(self, candidate: str) -> bool:
        if not self.verification_token:
            return False
        return hmac.compare_digest(
            self.verification_token.encode("utf-8"),
            (candidate or "").encode("utf-8"),
        )
