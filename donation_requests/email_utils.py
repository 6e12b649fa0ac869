from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.conf import settings
import logging

logger = logging.getLogger(__name__)


def _send(subject, recipient_email, html_template, text_template, context):
    html_content = render_to_string(html_template, context)
    text_content = render_to_string(text_template, context)

    reply_to = getattr(settings, 'REPLY_TO_EMAIL', '')
    email = EmailMultiAlternatives(
        subject=subject,
        body=text_content,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[recipient_email],
        reply_to=[reply_to] if reply_to else None
    )
    email.attach_alternative(html_content, "text/html")
    email.send(fail_silently=False)


def send_blood_request_email(blood_request):
    """
    Tell the target donor that someone needs their blood
    """
    try:
        donor = blood_request.donor
        requester = blood_request.requester

        context = {
            'donor': donor,
            'requester': requester,
            'request': blood_request,
            'portal_url': f"{settings.FRONTEND_URL}/requests",
        }
        _send(
            f"Blood donation request from {requester.name} ({donor.blood_group})",
            donor.user.email,
            'emails/blood_request.html',
            'emails/blood_request.txt',
            context,
        )

        logger.info(f"Blood request email sent to {donor.user.email}")
        return True

    except Exception as e:
        logger.error(f"Failed to send blood request email: {str(e)}")
        return False


def send_request_status_email(blood_request, recipient):
    """
    Tell the other party that a request was rejected or cancelled
    """
    try:
        context = {
            'recipient': recipient,
            'request': blood_request,
            'portal_url': f"{settings.FRONTEND_URL}/requests",
        }
        _send(
            f"Blood request {blood_request.status}",
            recipient.user.email,
            'emails/request_status_update.html',
            'emails/request_status_update.txt',
            context,
        )

        logger.info(f"Request status email ({blood_request.status}) sent to {recipient.user.email}")
        return True

    except Exception as e:
        logger.error(f"Failed to send request status email: {str(e)}")
        return False
