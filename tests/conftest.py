import itertools

import numpy as np
import pandas as pd
import pytest

YEAR_EFFECT = {2010: -4.0, 2011: 0.0, 2012: 3.0, 2013: 6.0}


def _genotypes(alleles: tuple, n: int, rng: np.random.Generator) -> list[str]:
    if len(alleles) == 1:
        a = alleles[0]
        return [f"{a}/{a}"] * n
    pool = [f"{a}/{b}" for a, b in itertools.combinations_with_replacement(sorted(alleles), 2)]
    cycle = [pool[i % len(pool)] for i in range(n)]
    return list(rng.permutation(cycle))


def make_observations(
    loci: dict[str, tuple],
    n_fish: int = 60,
    effect: float = 6.0,
    seed: int = 0,
) -> pd.DataFrame:
    """
    Long table: one row per fish per locus, n_fish in each of two collections.
    The first locus carries an additive genotype effect on mo_da.
    """
    rng = np.random.default_rng(seed)
    rows = []
    for coll in ("Nimbus", "Coleman"):
        years = rng.permutation([2010 + (i % 4) for i in range(n_fish)])
        sexes = rng.permutation(["F" if i % 2 else "M" for i in range(n_fish)])
        sexes[:3] = "?"
        ages = rng.permutation([3 + (i % 2) for i in range(n_fish)])
        noise = rng.normal(0.0, 2.0, n_fish)
        genos = {locus: _genotypes(alleles, n_fish, rng) for locus, alleles in loci.items()}
        causal = next(iter(loci))

        for i in range(n_fish):
            dose = genos[causal][i].split("/").count(sorted(loci[causal])[-1]) if len(loci[causal]) == 2 else 0
            mo_da = 280.0 + YEAR_EFFECT[int(years[i])] + effect * dose + noise[i]
            for locus in loci:
                rows.append(
                    {
                        "fish_id": f"{coll[:3]}{i:03d}",
                        "mo_da": round(mo_da, 3),
                        "collection": coll,
                        "Locus_new": locus,
                        "genotype": genos[locus][i],
                        "sex": sexes[i],
                        "age_spawn": int(ages[i]),
                        "year": int(years[i]),
                    }
                )
    return pd.DataFrame(rows)


@pytest.fixture
def make_obs():
    return make_observations


@pytest.fixture
def small_obs():
    # one biallelic, one monomorphic, one triallelic locus
    return make_observations({"L01": ("A", "G"), "L02": ("C",), "L03": ("A", "C", "T")})
