import logging

from database.db import Base, engine

logger = logging.getLogger(__name__)


def import_models():
    """relationship 문자열 참조 해석을 위해 모든 모델 모듈을 로드"""
    from models import users, courses, students, attendance, criteria, grades  # noqa: F401
    from models import grade_configurations, grade_scores, quizzes, groups, notes  # noqa: F401


def init_db(bind=None):
    """테이블이 없으면 생성 (마이그레이션 도구 미사용 환경용)"""
    import_models()
    Base.metadata.create_all(bind=bind or engine)
    logger.info("database tables ensured")
