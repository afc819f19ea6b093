from .step_10_acquire_kernel import AcquireKernelStep
from .step_20_extract_kernel import ExtractKernelStep
from .step_25_install_headers import InstallHeadersStep
from .step_30_install_kernel import InstallKernelStep
from .step_40_create_grub_entry import CreateGrubEntryStep
from .step_50_set_default_boot import SetDefaultBootStep
from .step_60_install_vpn_tools import InstallVpnToolsStep
from .step_70_check_vpn_tools import CheckVpnToolsStep
from .step_90_finalize_reboot import FinalizeRebootStep
from .wg_10_write_interface_config import WriteInterfaceConfigStep
from .wg_20_bring_up_interface import BringUpInterfaceStep
from .wg_30_check_connectivity import CheckConnectivityStep
from .wg_40_enable_service import EnableServiceStep

__all__ = [
    "AcquireKernelStep",
    "ExtractKernelStep",
    "InstallHeadersStep",
    "InstallKernelStep",
    "CreateGrubEntryStep",
    "SetDefaultBootStep",
    "InstallVpnToolsStep",
    "CheckVpnToolsStep",
    "FinalizeRebootStep",
    "WriteInterfaceConfigStep",
    "BringUpInterfaceStep",
    "CheckConnectivityStep",
    "EnableServiceStep",
]
