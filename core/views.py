"""API views for the notification engine.

Request bodies and query strings are validated with pydantic inside each
view; engine exceptions (not found, invalid transitions) are left to the
DRF exception handler.
"""

import structlog
from pydantic import BaseModel, ValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from core.auth.context import require_current_user_id
from core.schemas.batch import BatchCreate, BatchDetail
from core.schemas.notification import (
    MarkClickedRequest,
    NotificationCreate,
    NotificationDetail,
    NotificationFilters,
    NotificationUpdateRequest,
    TemplateNotificationRequest,
)
from core.schemas.preference import PreferenceDetail, PreferenceUpdate
from core.schemas.template import TemplateCreate, TemplateDetail
from core.services.notification_service import notification_service

logger = structlog.get_logger(__name__)


def _parse(schema: type[BaseModel], data) -> BaseModel:
    """Validate request data; raises pydantic's ValidationError."""
    return schema.model_validate(dict(data))


def _bad_request(e: ValidationError, **context) -> Response:
    """Build the 400 response for a pydantic validation failure."""
    errors = e.errors(include_url=False, include_context=False)
    logger.warning("invalid_request", validation_errors=errors, **context)
    return Response(
        {
            "error": "bad_request",
            "message": "Invalid request parameters",
            "errors": errors,
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


class NotificationListView(APIView):
    """Notifications collection.

    GET: Page through the caller's notifications.
    POST: Create a notification from explicit content (service callers).
    """

    def get(self, request):
        """List the caller's notifications.

        Query parameters: limit, offset, type, read, priority, category,
        start_date, end_date.

        Returns:
            200 OK with the page, total count and unread count
            400 Bad Request if a filter is invalid
        """
        recipient_id = require_current_user_id()
        try:
            filters = _parse(NotificationFilters, request.query_params.dict())
        except ValidationError as e:
            return _bad_request(e, recipient_id=recipient_id)

        result = notification_service.get_user_notifications(recipient_id, filters)
        return Response(result.model_dump(), status=status.HTTP_200_OK)

    def post(self, request):
        """Create and queue a notification.

        Returns:
            201 Created with the notification
            400 Bad Request if validation fails
        """
        try:
            data = _parse(NotificationCreate, request.data)
        except ValidationError as e:
            return _bad_request(e)

        notification = notification_service.create_notification(data)
        return Response(
            NotificationDetail.model_validate(notification).model_dump(),
            status=status.HTTP_201_CREATED,
        )


class TemplateNotificationView(APIView):
    """Render a template for one recipient and queue its delivery."""

    def post(self, request):
        """Create a notification from a template.

        Returns:
            201 Created with the notification
            400 Bad Request if validation fails
            404 Not Found if the template does not exist
        """
        try:
            data = _parse(TemplateNotificationRequest, request.data)
        except ValidationError as e:
            return _bad_request(e)

        notification = notification_service.create_from_template(data)
        logger.info(
            "template_notification_created",
            template_id=data.template_id,
            notification_id=str(notification.notification_id),
        )
        return Response(
            NotificationDetail.model_validate(notification).model_dump(),
            status=status.HTTP_201_CREATED,
        )


class NotificationDetailView(APIView):
    """A single notification owned by the caller.

    GET: Retrieve it.
    PATCH: Update editable fields.
    DELETE: Remove it.
    """

    def get(self, _request, notification_id):
        """Return the notification, or 404 if it is not the caller's."""
        notification = notification_service.get_notification(
            notification_id, recipient_id=require_current_user_id()
        )
        return Response(
            NotificationDetail.model_validate(notification).model_dump(),
            status=status.HTTP_200_OK,
        )

    def patch(self, request, notification_id):
        """Apply a partial update.

        Returns:
            200 OK with the updated notification
            400 Bad Request if validation fails or no field was given
            404 Not Found if it is not the caller's notification
        """
        recipient_id = require_current_user_id()
        try:
            changes = _parse(NotificationUpdateRequest, request.data)
        except ValidationError as e:
            return _bad_request(e, notification_id=notification_id)

        notification = notification_service.update_notification(
            notification_id, changes, recipient_id=recipient_id
        )
        return Response(
            NotificationDetail.model_validate(notification).model_dump(),
            status=status.HTTP_200_OK,
        )

    def delete(self, _request, notification_id):
        """Delete the notification.

        Returns:
            204 No Content on success
            404 Not Found if it is not the caller's notification
        """
        notification_service.delete_notification(
            notification_id, recipient_id=require_current_user_id()
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


class MarkReadView(APIView):
    """Mark one notification as read. Repeating the call changes nothing."""

    def post(self, _request, notification_id):
        """Set the read flag and return the notification."""
        notification = notification_service.mark_as_read(
            notification_id, recipient_id=require_current_user_id()
        )
        return Response(
            NotificationDetail.model_validate(notification).model_dump(),
            status=status.HTTP_200_OK,
        )


class MarkClickedView(APIView):
    """Mark one notification as clicked, with an optional action taken."""

    def post(self, request, notification_id):
        """Set the clicked flag and return the notification."""
        recipient_id = require_current_user_id()
        try:
            data = _parse(MarkClickedRequest, request.data)
        except ValidationError as e:
            return _bad_request(e, notification_id=notification_id)

        notification = notification_service.mark_as_clicked(
            notification_id, data.action_taken, recipient_id=recipient_id
        )
        return Response(
            NotificationDetail.model_validate(notification).model_dump(),
            status=status.HTTP_200_OK,
        )


class MarkDismissedView(APIView):
    """Mark one notification as dismissed."""

    def post(self, _request, notification_id):
        """Set the dismissed flag and return the notification."""
        notification = notification_service.mark_as_dismissed(
            notification_id, recipient_id=require_current_user_id()
        )
        return Response(
            NotificationDetail.model_validate(notification).model_dump(),
            status=status.HTTP_200_OK,
        )


class MarkAllReadView(APIView):
    """Mark every unread notification of the caller as read."""

    def post(self, _request):
        """Return how many notifications changed."""
        count = notification_service.mark_all_as_read(require_current_user_id())
        return Response({"updated_count": count}, status=status.HTTP_200_OK)


class DeliveryReceiptView(APIView):
    """Provider delivery receipt for one channel of a notification."""

    def post(self, _request, notification_id, channel):
        """Mark the channel delivered.

        Returns:
            200 OK with the notification
            400 Bad Request if the channel is unknown
            404 Not Found if the notification does not exist
        """
        notification = notification_service.acknowledge_delivery(
            notification_id, channel
        )
        return Response(
            NotificationDetail.model_validate(notification).model_dump(),
            status=status.HTTP_200_OK,
        )


class TemplateListView(APIView):
    """Templates collection.

    GET: Active templates of one type (``?type=``).
    POST: Register a template.
    """

    def get(self, request):
        """List active templates of the requested type."""
        notification_type = request.query_params.get("type")
        if not notification_type:
            return Response(
                {
                    "error": "bad_request",
                    "message": "Invalid request parameters",
                    "detail": "The 'type' query parameter is required",
                },
                status=status.HTTP_400_BAD_REQUEST,
            )

        templates = notification_service.list_templates(notification_type)
        return Response(
            {
                "templates": [
                    TemplateDetail.model_validate(t).model_dump() for t in templates
                ]
            },
            status=status.HTTP_200_OK,
        )

    def post(self, request):
        """Store a template.

        Returns:
            201 Created with the template
            400 Bad Request if validation fails or the ID is taken
        """
        try:
            data = _parse(TemplateCreate, request.data)
        except ValidationError as e:
            return _bad_request(e)

        template = notification_service.create_template(data)
        return Response(
            TemplateDetail.model_validate(template).model_dump(),
            status=status.HTTP_201_CREATED,
        )


class TemplateDetailView(APIView):
    """A single template."""

    def get(self, _request, template_id):
        """Return the template or 404."""
        template = notification_service.get_template(template_id)
        return Response(
            TemplateDetail.model_validate(template).model_dump(),
            status=status.HTTP_200_OK,
        )


class PreferenceListView(APIView):
    """All of the caller's preferences, one row per notification type."""

    def get(self, _request):
        """Return the caller's preferences, creating defaults as needed."""
        preferences = notification_service.get_user_preferences(
            require_current_user_id()
        )
        return Response(
            {
                "preferences": [
                    PreferenceDetail.model_validate(p).model_dump()
                    for p in preferences
                ]
            },
            status=status.HTTP_200_OK,
        )


class PreferenceDetailView(APIView):
    """The caller's preferences for one notification type."""

    def patch(self, request, notification_type):
        """Update the given fields, creating the row when missing.

        Returns:
            200 OK with the stored preferences
            400 Bad Request if validation fails or the type is unknown
        """
        recipient_id = require_current_user_id()
        try:
            changes = _parse(PreferenceUpdate, request.data)
        except ValidationError as e:
            return _bad_request(e, recipient_id=recipient_id)

        preference = notification_service.update_user_preferences(
            recipient_id, notification_type, changes
        )
        return Response(
            PreferenceDetail.model_validate(preference).model_dump(),
            status=status.HTTP_200_OK,
        )


class BatchListView(APIView):
    """Create campaign batches."""

    def post(self, request):
        """Create a batch, scheduling it when ``scheduled_for`` is future.

        Returns:
            201 Created with the batch
            400 Bad Request if validation fails
            404 Not Found if the template does not exist
        """
        try:
            definition = _parse(BatchCreate, request.data)
        except ValidationError as e:
            return _bad_request(e)

        batch = notification_service.create_batch(definition)
        return Response(
            BatchDetail.model_validate(batch).model_dump(),
            status=status.HTTP_201_CREATED,
        )


class BatchDetailView(APIView):
    """A single campaign batch with its progress counters."""

    def get(self, _request, batch_id):
        """Return the batch or 404."""
        batch = notification_service.get_batch(batch_id)
        return Response(
            BatchDetail.model_validate(batch).model_dump(),
            status=status.HTTP_200_OK,
        )


class BatchStartView(APIView):
    """Queue a draft or scheduled batch for sending."""

    def post(self, _request, batch_id):
        """Start the batch.

        Returns:
            202 Accepted with the batch
            404 Not Found if the batch does not exist
            409 Conflict if the batch cannot be started
        """
        batch = notification_service.start_batch(batch_id)
        return Response(
            BatchDetail.model_validate(batch).model_dump(),
            status=status.HTTP_202_ACCEPTED,
        )


class BatchCancelView(APIView):
    """Cancel a batch that has not finished."""

    def post(self, _request, batch_id):
        """Cancel the batch.

        Returns:
            200 OK with the batch
            404 Not Found if the batch does not exist
            409 Conflict if the batch already finished
        """
        batch = notification_service.cancel_batch(batch_id)
        return Response(
            BatchDetail.model_validate(batch).model_dump(),
            status=status.HTTP_200_OK,
        )


class NotificationStatsView(APIView):
    """Read, click and delivery statistics for the caller."""

    def get(self, request):
        """Aggregate the caller's notifications over an optional window.

        Query parameters: start_date, end_date (ISO 8601).

        Returns:
            200 OK with the statistics
            400 Bad Request if a date is malformed or the range is inverted
        """
        recipient_id = require_current_user_id()
        try:
            window = _parse(
                NotificationFilters,
                {
                    key: value
                    for key, value in request.query_params.items()
                    if key in ("start_date", "end_date", "startDate", "endDate")
                },
            )
        except ValidationError as e:
            return _bad_request(e, recipient_id=recipient_id)

        start_date, end_date = window.start_date, window.end_date
        if start_date and end_date and start_date > end_date:
            return Response(
                {
                    "error": "bad_request",
                    "message": "Invalid date range",
                    "detail": "start_date must be before or equal to end_date",
                },
                status=status.HTTP_400_BAD_REQUEST,
            )

        stats = notification_service.get_statistics(recipient_id, start_date, end_date)
        return Response(stats.model_dump(), status=status.HTTP_200_OK)
