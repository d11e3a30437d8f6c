import time

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET


@csrf_exempt
@require_GET
def health_check(request):
    """Liveness probe, returns 200 while the app is running."""
    return JsonResponse({
        'status': 'healthy',
        'timestamp': time.time(),
    })


def error_404(request, exception):
    """Custom 404 handler."""
    return JsonResponse({'error': 'Not found'}, status=404)


def error_500(request):
    """Custom 500 handler."""
    return JsonResponse({'error': 'Something went wrong'}, status=500)
