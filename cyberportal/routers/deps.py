import logging
from functools import lru_cache

from fastapi import Depends
from sqlmodel import Session

from ..application.ports.ai_worker import AIWorker
from ..application.ports.otp_sender import OTPSender
from ..application.services.admin_service import AdminService
from ..application.services.ai_service import AIService
from ..application.services.auth_service import AuthService
from ..application.services.identity_sync_service import IdentitySyncService
from ..application.services.learnbot_service import LearnbotService
from ..application.services.portal_service import PortalService
from ..application.services.report_service import ReportService
from ..config import settings
from ..database import get_session
from ..infrastructure.ai.subprocess_worker import SubprocessAIWorker
from ..infrastructure.audit.std_logger import StdAuditLogger
from ..infrastructure.otp.log_sender import LoggingOTPSender
from ..infrastructure.otp.twilio_provider import TwilioSMSSender
from ..infrastructure.persistence.sqlalchemy.repositories.admin_repository_sql import SqlAdminRepository
from ..infrastructure.persistence.sqlalchemy.repositories.identity_repository_sql import SqlIdentityRepository
from ..infrastructure.persistence.sqlalchemy.repositories.learnbot_repository_sql import SqlLearnbotRepository
from ..infrastructure.persistence.sqlalchemy.repositories.report_repository_sql import SqlReportRepository
from ..infrastructure.persistence.sqlalchemy.repositories.user_repository_sql import SqlUserRepository

logger = logging.getLogger(__name__)


@lru_cache()
def get_otp_sender() -> OTPSender:
    if settings.twilio_configured:
        logger.info("OTP delivery via Twilio SMS")
        return TwilioSMSSender()
    logger.info("Twilio not configured; OTPs will only be logged")
    return LoggingOTPSender()


@lru_cache()
def get_ai_worker() -> AIWorker:
    return SubprocessAIWorker()


def get_ai_service(worker: AIWorker = Depends(get_ai_worker)) -> AIService:
    return AIService(worker=worker)


def get_auth_service(session: Session = Depends(get_session),
                     otp_sender: OTPSender = Depends(get_otp_sender)) -> AuthService:
    return AuthService(
        user_repo=SqlUserRepository(session),
        otp_sender=otp_sender,
        audit_logger=StdAuditLogger(),
        expose_otp=settings.EXPOSE_OTP_IN_RESPONSE,
    )


def get_portal_service(session: Session = Depends(get_session)) -> PortalService:
    return PortalService(user_repo=SqlUserRepository(session), report_repo=SqlReportRepository(session))


def get_report_service(session: Session = Depends(get_session)) -> ReportService:
    return ReportService(user_repo=SqlUserRepository(session), report_repo=SqlReportRepository(session))


def get_learnbot_service(session: Session = Depends(get_session),
                         ai: AIService = Depends(get_ai_service)) -> LearnbotService:
    return LearnbotService(
        user_repo=SqlUserRepository(session),
        learnbot_repo=SqlLearnbotRepository(session),
        ai=ai,
    )


def get_admin_service(session: Session = Depends(get_session)) -> AdminService:
    return AdminService(
        user_repo=SqlUserRepository(session),
        admin_repo=SqlAdminRepository(session),
        report_repo=SqlReportRepository(session),
        satisfaction_score=settings.SATISFACTION_SCORE,
    )


def get_identity_sync_service(session: Session = Depends(get_session)) -> IdentitySyncService:
    return IdentitySyncService(identity_repo=SqlIdentityRepository(session))
