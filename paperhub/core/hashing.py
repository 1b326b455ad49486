from passlib.context import CryptContext

# Comment passwords only guard deletion.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

class Hasher:
    @staticmethod
    def hash_password(password: str) -> str:
        return pwd_context.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        if not plain_password or not hashed_password:
            return False
        return pwd_context.verify(plain_password, hashed_password)
