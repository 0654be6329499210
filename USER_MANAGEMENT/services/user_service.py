import logging
from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from core.config import PROFILE_IMAGE_COLLECTION
from core.exceptions import NotFoundError, PersistenceError, StorageError
from models.user import User
from repositories.user_repository import UserRepository
from schemas.user_schema import UserForm, ImageUpload
from utils.image_sniffer import detect_image_type
from utils.validators import validate_user_input

logger = logging.getLogger(__name__)

MIN_USER_ID = -(2 ** 63)
MAX_USER_ID = 2 ** 63 - 1

class UserService:

    @staticmethod
    def list_users(db: Session) -> List[User]:
        return UserRepository.get_all(db)

    @staticmethod
    def get_user(db: Session, user_id: int) -> User:
        # ids past the BIGINT range cannot exist and sqlite refuses to bind them
        if not MIN_USER_ID <= user_id <= MAX_USER_ID:
            raise NotFoundError(f"User {user_id} not found")
        user = UserRepository.get_by_id(db, user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    @staticmethod
    def create_user(db: Session, storage, form: UserForm, image_upload: Optional[ImageUpload] = None) -> User:
        validate_user_input(db, form, image_upload)

        path = UserService._store_image(storage, image_upload) if image_upload else None

        user = User(
            name          = form.name,
            email         = form.email,
            mobile        = form.mobile,
            address       = form.address,
            profile_image = path,
        )
        try:
            user = UserRepository.create_user(db, user)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Create user failed for email={form.email}: {e}", exc_info=True)
            if path:
                UserService._discard_image(storage, path)
            raise PersistenceError("User could not be saved") from e

        logger.info(f"User created: id={user.id}")
        return user

    @staticmethod
    def update_user(db: Session, storage, user_id: int, form: UserForm, image_upload: Optional[ImageUpload] = None) -> User:
        user = UserService.get_user(db, user_id)
        validate_user_input(db, form, image_upload, ignore_id=user.id)

        previous_path = user.profile_image
        new_path = UserService._store_image(storage, image_upload) if image_upload else None

        user.name          = form.name
        user.email         = form.email
        user.mobile        = form.mobile
        user.address       = form.address
        user.profile_image = new_path or previous_path
        try:
            user = UserRepository.update_user(db, user)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Update user failed for id={user_id}: {e}", exc_info=True)
            if new_path:
                UserService._discard_image(storage, new_path)
            raise PersistenceError("User could not be saved") from e

        if new_path and previous_path:
            UserService._discard_image(storage, previous_path)

        logger.info(f"User updated: id={user.id}")
        return user

    @staticmethod
    def delete_user(db: Session, storage, user_id: int) -> None:
        user = UserService.get_user(db, user_id)

        if user.profile_image:
            UserService._discard_image(storage, user.profile_image)

        try:
            UserRepository.delete_user(db, user)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Delete user failed for id={user_id}: {e}", exc_info=True)
            raise PersistenceError("User could not be deleted") from e

        logger.info(f"User deleted: id={user_id}")

    @staticmethod
    def _store_image(storage, image_upload: ImageUpload) -> str:
        extension = detect_image_type(image_upload.content)
        try:
            return storage.put(PROFILE_IMAGE_COLLECTION, image_upload.content, extension)
        except StorageError:
            logger.error(f"Storing profile image {image_upload.filename} failed", exc_info=True)
            raise

    @staticmethod
    def _discard_image(storage, path: str) -> None:
        # failure leaves an orphan file; callers carry on
        try:
            storage.delete(path)
        except StorageError as e:
            logger.warning(f"Failed to delete blob {path}: {e}")
