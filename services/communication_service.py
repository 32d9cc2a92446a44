# services/communication_service.py

from flask import current_app
from services.utils import deliver_communication, DeliveryError


class CommunicationService:

    @staticmethod
    def send_communication(communication):
        """
        Deliver a communication to every guardian linked to it.

        Returns ``{'success', 'message', 'sent', 'errors'}``. Success means no
        guardian failed; a communication without guardians succeeds with
        nothing sent. The communication's status is left to the caller.
        """
        guardians = list(communication.guardians)
        sent = 0
        errors = []

        for guardian in guardians:
            try:
                deliver_communication(communication, guardian)
                sent += 1
            except DeliveryError as e:
                current_app.logger.error(
                    f"❌ Communication {communication.id} not delivered to guardian {guardian.id}: {e}"
                )
                errors.append({
                    'guardian_id': guardian.id,
                    'guardian_name': guardian.name,
                    'error': str(e)
                })

        success = not errors
        if not guardians:
            message = 'Communication has no guardians to notify'
        elif success:
            message = f'Communication sent to {sent} guardian(s)'
        elif sent:
            message = f'Communication sent to {sent} of {len(guardians)} guardian(s); {len(errors)} failed'
        else:
            message = f'Communication could not be sent to any of the {len(guardians)} guardian(s)'

        current_app.logger.info(f"Dispatch of communication {communication.id}: {message}")
        return {
            'success': success,
            'message': message,
            'sent': sent,
            'errors': errors
        }
