from services.models import DeviceProfile, DeviceSelector

# iPhone 13/14 class device
MOBILE_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 15_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/15.0 Mobile/15E148 Safari/604.1"
)

DESKTOP_PROFILE = DeviceProfile(
    name=DeviceSelector.DESKTOP.value,
    viewport_width=1920,
    viewport_height=1080,
)

MOBILE_PROFILE = DeviceProfile(
    name=DeviceSelector.MOBILE.value,
    viewport_width=390,
    viewport_height=844,
    is_mobile=True,
    has_touch=True,
    user_agent=MOBILE_USER_AGENT,
)

PROFILES = {
    DeviceSelector.DESKTOP: DESKTOP_PROFILE,
    DeviceSelector.MOBILE: MOBILE_PROFILE,
}


def resolve_device_profile(selector=None) -> DeviceProfile:
    """디바이스 선택값 -> 프로필. 알 수 없는 값은 desktop."""
    return PROFILES[DeviceSelector.parse(selector)]
