from common.repository.user_repo import UserRepository
from common.utils.custom_exceptions import IncorrectCredentials
from common.utils.jwt_service import create_staff_token
import bcrypt


class UserService:
    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    def login(self, email: str, password: str) -> str:
        user = self.user_repo.get_by_mail(mail=email)
        if user is None:
            raise IncorrectCredentials("Invalid email or password")

        if not bcrypt.checkpw(
            password.encode("utf-8"),
            user.password.encode("utf-8"),
        ):
            raise IncorrectCredentials("Invalid email or password")

        return create_staff_token(user)
