from amrgen.common.from_params import FromParams
from amrgen.common.params import Params
from amrgen.common.registrable import Registrable
from amrgen.common.tqdm import Tqdm
