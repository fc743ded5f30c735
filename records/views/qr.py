"""
Patient card scanning.

Scans are tenant agnostic: the scanner authenticates in their own tenant
and may read a patient of any tenant, graded by
:func:`records.services.cross_tenant.scan_patient_qr`.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.permissions import IsTenantMember, permission_required, role_required
from records.repositories.access_logs import AccessLogRepository
from records.serializers.qr import AccessLogSerializer, QrScanSerializer
from records.services.cross_tenant import scan_patient_qr


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsTenantMember, role_required('doctor', 'midwife')])
def scan_qr_view(request):
    s = QrScanSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    result = scan_patient_qr(
        s.validated_data['qr_code'],
        request.user,
        ip_address=request.META.get('REMOTE_ADDR'),
        user_agent=request.META.get('HTTP_USER_AGENT'),
    )
    if result.patient is None:
        return Response({'success': False, 'message': result.message}, status=404)
    if not result.success:
        return Response({'success': False, 'message': result.message}, status=403)
    return Response({
        'success': True,
        'message': result.message,
        'data': {'accessLevel': result.access_level, 'patient': result.data},
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsTenantMember, permission_required('system.audit_logs')])
def access_logs_view(request):
    logs = AccessLogRepository().recent_cross_tenant(request.tenant.pk)
    return Response({'success': True, 'data': AccessLogSerializer(logs, many=True).data})
