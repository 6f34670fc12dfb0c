import corefscore.common.logging  # noqa
from corefscore.common.from_params import FromParams
from corefscore.common.params import Params
from corefscore.common.registrable import Registrable
