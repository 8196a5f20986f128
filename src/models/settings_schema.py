"""
Declarative settings schemas

Registered with the host once at plugin load. The host renders them as the
admin-facing settings panel and delivers edited values back as loosely
typed component fields.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple

from models.enums import ComponentKind, InputMode, AnimationMode, TransitionMode


@dataclass(frozen=True)
class SettingField:
    """One settings panel field"""
    id: str
    type: str
    name: Optional[str] = None
    help: Optional[str] = None
    default: Any = None
    values: Optional[Tuple[str, ...]] = None
    min: Optional[float] = None
    max: Optional[float] = None
    precision: Optional[int] = None
    value: Optional[str] = None  # label text

    def to_dict(self) -> Dict[str, Any]:
        data = {k: v for k, v in asdict(self).items() if v is not None}
        if self.values is not None:
            data["values"] = list(self.values)
        return data


def _label(field_id: str, text: str) -> SettingField:
    return SettingField(id=field_id, type="label", value=text)


@dataclass(frozen=True)
class ComponentDefinition:
    """Component registration sent to the host"""
    kind: ComponentKind
    name: str
    description: str
    settings: List[SettingField] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.kind.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "settings": [s.to_dict() for s in self.settings],
        }

    def defaults(self) -> Dict[str, Any]:
        """Field id → default value for every non-label field"""
        return {
            s.id: s.default
            for s in self.settings
            if s.type != "label" and s.default is not None
        }


TRIGGER_DEFINITION = ComponentDefinition(
    kind=ComponentKind.TRIGGER,
    name="Asset Link Trigger",
    description=(
        "Sends a trigger based on user interaction using a defined ActionID. "
        "Can restrict activation by role and assign a role when triggered."
    ),
    settings=[
        _label("header-interaction", "Interaction Settings"),
        SettingField(id="inputType", name="Input Type", type="select",
                     help="Select the interaction type.",
                     values=tuple(m.value for m in InputMode), default=InputMode.ON_CLICK.value),
        SettingField(id="proximityDistance", name="Proximity Distance", type="number",
                     help="Distance (in meters) for proximity triggers.", default=2),
        SettingField(id="requiredUserCount", name="Required Users", type="number",
                     help="Users required in Multi-Proximity mode.", default=2),
        _label("header-action", "Action Settings"),
        SettingField(id="actionID", name="ActionID", type="input",
                     help="Enter a unique ActionID for this trigger."),
        SettingField(id="adminOnly", name="Admin Only", type="checkbox",
                     help="If checked, only admin users can trigger this asset.", default=False),
        SettingField(id="roleRestricted", name="Role Restricted", type="checkbox",
                     help="If checked, only users with a specified role can trigger this asset.",
                     default=False),
        SettingField(id="requiredRole", name="Required Role", type="input",
                     help="Enter the role required to trigger this asset (must be a valid role)."),
        SettingField(id="assignRole", name="Role to Assign", type="input",
                     help="Enter the role to assign to a user upon trigger activation "
                          "(must be a valid role)."),
    ],
)


RECEIVER_DEFINITION = ComponentDefinition(
    kind=ComponentKind.RECEIVER,
    name="Asset Link Receiver",
    description=(
        "Listens for triggers and performs animations and sound. Also relays its sound "
        "via messages. Can restrict processing based on required roles."
    ),
    settings=[
        _label("header-receiver", "Receiver Settings"),
        SettingField(id="actionID", name="ActionID", type="input",
                     help="Enter the ActionID this receiver should listen for."),
        SettingField(id="adminOnly", name="Admin Only", type="checkbox",
                     help="If checked, this receiver only processes triggers from admin users.",
                     default=False),
        SettingField(id="roleRestricted", name="Role Restricted", type="checkbox",
                     help="If checked, only triggers from users with the required role "
                          "will be processed.", default=False),
        SettingField(id="requiredRole", name="Required Role", type="input",
                     help="Enter the role required to interact with this receiver."),
        SettingField(id="animationMode", name="Animation Mode", type="select",
                     help="Reactive: one-off animation; Transition: cycle or mapping transitions.",
                     values=tuple(m.value for m in AnimationMode),
                     default=AnimationMode.REACTIVE.value),
        _label("header-sound", "Sound Settings"),
        SettingField(id="sound", name="Sound", type="string",
                     help="Sound file URL (or path) for playback.", default=""),
        SettingField(id="volume", name="Volume", type="slider",
                     help="Set the volume for audio playback (0 to 1).",
                     default=1, min=0, max=1, precision=2),
        SettingField(id="disableLocalAudio", name="Disable Local Audio", type="checkbox",
                     help="If checked, only secondary outputs will play audio.", default=False),
        _label("header-reactive", "Reactive Settings"),
        SettingField(id="reactiveAnimation", name="Reactive Animation", type="string",
                     help="Animation to play when triggered (active state).", default="active"),
        SettingField(id="defaultAnimation", name="Default Animation", type="string",
                     help="Animation to revert to (idle state).", default="default"),
        SettingField(id="cooldown", name="Cooldown", type="number",
                     help="Minimum time (in seconds) before the asset can be triggered again.",
                     default=1),
        _label("header-transition", "Transition Settings"),
        SettingField(id="transitionMode", name="Transition Mode", type="select",
                     help="Cycle: bidirectional cycle; Mapping: custom transitions.",
                     values=tuple(m.value for m in TransitionMode),
                     default=TransitionMode.CYCLE.value),
        SettingField(id="staticStates", name="Static States", type="string",
                     help="Comma-separated static state animation names.",
                     default="static01, static02, static03"),
        SettingField(id="forwardTransitions", name="Forward Transitions", type="string",
                     help="Comma-separated forward transition animations.",
                     default="transition01, transition02"),
        SettingField(id="reverseTransitions", name="Reverse Transitions", type="string",
                     help="Comma-separated reverse transition animations "
                          "(order will be reversed internally).",
                     default="return02, return01"),
        SettingField(id="initialState", name="Initial State", type="string",
                     help="Initial static state (Mapping mode).", default="static01"),
        SettingField(id="transitionMapping", name="Transition Mapping", type="string",
                     help='JSON array defining custom transitions (keys: "from", "to", "forward", '
                          '"return"; optional: "soundForward", "soundReturn").',
                     default="[]"),
    ],
)


RELAY_DEFINITION = ComponentDefinition(
    kind=ComponentKind.RELAY,
    name="Asset Link Secondary Audio Output",
    description="Relays sound from a specified source so that the sound is played "
                "from this asset's location.",
    settings=[
        SettingField(id="sourceID", name="Source Object ID", type="input",
                     help="Enter the ID of the object whose sound should be relayed."),
    ],
)


COMPONENT_DEFINITIONS: Dict[ComponentKind, ComponentDefinition] = {
    d.kind: d for d in (TRIGGER_DEFINITION, RECEIVER_DEFINITION, RELAY_DEFINITION)
}


def role_panel_definition(available_roles: str, roles_display: str) -> Dict[str, Any]:
    """Admin-only role management menu (section: admin-panel)"""
    return {
        "id": "assetlink-role-management",
        "title": "Role Management",
        "text": "Roles",
        "section": "admin-panel",
        "panel": {
            "fields": [
                {
                    "id": "roles",
                    "name": "Define Roles (comma-separated)",
                    "help": "Enter roles separated by commas.",
                    "type": "textarea",
                    "initialValue": available_roles,
                    "placeholder": "e.g., level01, level02, admin",
                },
                {"id": "saveRoles", "name": "Save Roles", "type": "button"},
                {"id": "clearRoles", "name": "Clear All Roles", "type": "button"},
                {
                    "id": "userRolesDisplay",
                    "name": "User Roles",
                    "type": "label",
                    "value": roles_display,
                    "help": "List of users and their assigned roles.",
                },
            ],
            "width": 350,
            "height": 250,
        },
    }
