"""
Admin panel.

Access and model permissions follow the user's role capabilities (see
`User.is_staff` and `User.has_perm`). Flow measures are created, edited
and withdrawn through FlowMeasureService so the panel enforces the same
rules as the API.
"""
from django import forms
from django.contrib import admin, messages
from django.utils import timezone

from .constants import EDITABLE_FIELDS
from .exceptions import FlowMeasureValidationError, InvalidStatusTransition, RegionNotPermitted
from .models import (
    DiscordNotification,
    DiscordNotificationStatus,
    DiscordTag,
    Event,
    FINISHED_STATUSES,
    FlightInformationRegion,
    FlowMeasure,
    Role,
    User,
)
from .services import AuthorizationService, FlowMeasureService
from .services.flow_measure_rules import validate_flow_measure


class DiscordTagInline(admin.TabularInline):
    model = DiscordTag
    extra = 0
    fields = ['tag', 'description']


@admin.register(FlightInformationRegion)
class FlightInformationRegionAdmin(admin.ModelAdmin):
    list_display = ['identifier', 'name']
    search_fields = ['identifier', 'name']
    ordering = ['identifier']
    inlines = [DiscordTagInline]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ['name', 'flight_information_region', 'date_start', 'date_end']
    list_filter = ['flight_information_region']
    search_fields = ['name']
    ordering = ['-date_start']


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ['key', 'description']


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'role', 'is_active']
    list_filter = ['role', 'is_active']
    search_fields = ['id', 'name']
    fields = ['id', 'name', 'role', 'flight_information_regions', 'is_active']
    filter_horizontal = ['flight_information_regions']


class FlowMeasureStateFilter(admin.SimpleListFilter):
    title = 'state'
    parameter_name = 'state'

    def lookups(self, request, model_admin):
        return (
            ('current', 'Notified or active'),
            ('finished', 'Withdrawn or expired'),
        )

    def queryset(self, request, queryset):
        if self.value() == 'current':
            return queryset.unfinished()
        if self.value() == 'finished':
            return queryset.filter(status__in=FINISHED_STATUSES)
        return queryset


class FlowMeasureAdminForm(forms.ModelForm):
    """
    Flow measure form.

    Type-dependent fields are checked by `validate_flow_measure`; the form
    itself only parses input. `current_user` is set by the admin.
    """

    current_user = None

    minutes = forms.IntegerField(required=False, min_value=0)
    seconds = forms.IntegerField(required=False, min_value=0)
    mandatory_route = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={'rows': 3}),
        help_text='One route per line.'
    )

    class Meta:
        model = FlowMeasure
        fields = [
            'flight_information_region',
            'event',
            'type',
            'start_time',
            'end_time',
            'value',
            'minutes',
            'seconds',
            'mandatory_route',
            'reason',
            'additional_filters',
            'notified_flight_information_regions',
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.service_data = {}

        if 'flight_information_region' in self.fields:
            self.fields['flight_information_region'].required = False
            self.fields['flight_information_region'].queryset = AuthorizationService.visible_regions(
                self.current_user
            )
        if 'event' in self.fields:
            self.fields['event'].queryset = Event.objects.ending_after(timezone.now())

        if self.instance.pk:
            self.initial['mandatory_route'] = '\n'.join(self.instance.mandatory_route or [])
            if self.instance.is_interval:
                self.initial['minutes'] = self.instance.minutes
                self.initial['seconds'] = self.instance.seconds
                self.initial['value'] = None

    def clean_mandatory_route(self):
        routes = self.cleaned_data.get('mandatory_route') or ''
        return [line.strip() for line in routes.splitlines() if line.strip()]

    def clean(self):
        cleaned_data = super().clean()
        if self.errors:
            return cleaned_data

        if self.instance.pk:
            submitted = [field for field in self.changed_data if field in EDITABLE_FIELDS]
        else:
            submitted = [field for field in self.Meta.fields if field in cleaned_data]

        data = {field: cleaned_data.get(field) for field in submitted}
        if 'notified_flight_information_regions' in data:
            data['notified_flight_information_regions'] = list(data['notified_flight_information_regions'] or [])

        try:
            validate_flow_measure(data, timezone.now(), instance=self.instance if self.instance.pk else None)
        except FlowMeasureValidationError as e:
            for field, field_errors in e.errors.items():
                field = field.split('.')[0]
                for message in field_errors:
                    self.add_error(field if field in self.fields else None, message)
            return cleaned_data

        self.service_data = data
        return cleaned_data


@admin.register(FlowMeasure)
class FlowMeasureAdmin(admin.ModelAdmin):
    form = FlowMeasureAdminForm
    list_display = [
        'identifier',
        'flight_information_region',
        'type',
        'status',
        'start_time',
        'end_time',
    ]
    list_filter = [FlowMeasureStateFilter, 'status', 'type', 'flight_information_region']
    search_fields = ['identifier', 'reason']
    ordering = ['-start_time']
    filter_horizontal = ['notified_flight_information_regions']
    actions = ['withdraw_selected']

    def get_readonly_fields(self, request, obj=None):
        if obj is None:
            return ['identifier', 'status']
        return ['identifier', 'status', 'flight_information_region', 'event', 'start_time', 'withdrawn_at']

    def get_form(self, request, obj=None, change=False, **kwargs):
        form = super().get_form(request, obj, change=change, **kwargs)
        form.current_user = request.user
        return form

    def has_change_permission(self, request, obj=None):
        if not super().has_change_permission(request, obj):
            return False
        if obj is None:
            return True
        return not obj.is_finished and AuthorizationService.can_edit_flow_measure(request.user, obj)

    def has_delete_permission(self, request, obj=None):
        # Measures are withdrawn instead
        return False

    def save_model(self, request, obj, form, change):
        if change:
            measure = FlowMeasure.objects.get(pk=obj.pk)
            FlowMeasureService.update(request.user, measure, form.service_data)
        else:
            measure = FlowMeasureService.create(request.user, form.service_data)
            obj.pk = measure.pk
        obj.refresh_from_db()

    def save_related(self, request, form, formsets, change):
        # Notified regions are saved by FlowMeasureService
        for formset in formsets:
            self.save_formset(request, form, formset, change=change)

    @admin.action(description='Withdraw selected flow measures')
    def withdraw_selected(self, request, queryset):
        withdrawn = 0
        for measure in queryset:
            try:
                FlowMeasureService.withdraw(measure, user=request.user)
            except (InvalidStatusTransition, RegionNotPermitted) as e:
                self.message_user(request, f"{measure.identifier}: {e.detail}", messages.WARNING)
                continue
            withdrawn += 1
        self.message_user(request, f"Withdrew {withdrawn} flow measure(s).")


@admin.register(DiscordNotification)
class DiscordNotificationAdmin(admin.ModelAdmin):
    list_display = ['flow_measure', 'type', 'status', 'sent_at', 'retry_count']
    list_filter = ['type', 'status']
    search_fields = ['flow_measure__identifier', 'remote_id']
    readonly_fields = [
        'flow_measure',
        'type',
        'content',
        'embeds',
        'status',
        'remote_id',
        'sent_at',
        'failure_reason',
        'retry_count',
    ]
    actions = ['resend_selected']

    def has_add_permission(self, request):
        return False

    @admin.action(description='Resend selected notifications')
    def resend_selected(self, request, queryset):
        from .tasks import send_discord_notification

        queued = 0
        for notification in queryset.exclude(status=DiscordNotificationStatus.SENT):
            send_discord_notification.delay(notification.id)
            queued += 1
        self.message_user(request, f"Queued {queued} notification(s) for delivery.")
